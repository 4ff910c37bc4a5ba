"""Benchmark learning and decoding on a slice of the Sci-Fi Gutenberg dataset.

Outputs a row with the columns:
  Corpus Size | Merges | Learning Time | Decoding Throughput |
  Compression Ratio | Size Reduction
"""

import argparse
import time

from datasets import load_dataset

from pairtok import PairTokenizer

HF_DATASET = "stevez80/Sci-Fi-Books-gutenberg"


def load_corpus(num_docs: int) -> str:
    """Load the first `num_docs` documents and join them into one corpus."""
    print(f"Loading {HF_DATASET} (non-streaming) …")
    ds = load_dataset(HF_DATASET, split="train")
    return "".join(ds[:num_docs]["text"])


def main() -> None:
    """Run the learn/decode benchmark and print a markdown table row."""
    parser = argparse.ArgumentParser(
        description="Benchmark PairTok learning and decoding."
    )
    parser.add_argument(
        "--num-docs",
        type=int,
        default=10,
        help="Number of documents to learn from (default: 10).",
    )
    parser.add_argument(
        "--merges",
        type=int,
        default=1_000,
        help="Merge budget (default: 1,000).",
    )
    parser.add_argument(
        "--replacements",
        type=int,
        default=1,
        help="Digrams promoted per round (default: 1).",
    )
    args = parser.parse_args()

    text = load_corpus(args.num_docs)
    if not text:
        raise RuntimeError("No documents loaded from dataset.")

    total_chars = len(text)
    corpus_mb = len(text.encode("utf-8")) / (1024 * 1024)

    # --- Learning ---
    tokenizer = PairTokenizer()
    t0 = time.perf_counter()
    encoded = tokenizer.train(text, args.merges, replacements=args.replacements)
    learn_secs = time.perf_counter() - t0

    # --- Decoding ---
    t0 = time.perf_counter()
    decoded = tokenizer.decode(encoded)
    decode_elapsed = time.perf_counter() - t0
    assert decoded == text, "Decode failed: output doesn't match input"
    decode_mtps = len(encoded) / decode_elapsed / 1_000_000

    # --- Compression stats ---
    compression_ratio = total_chars / len(encoded)
    size_reduction = (1 - 1 / compression_ratio) * 100

    if learn_secs >= 60:
        learn_str = f"{learn_secs / 60:.2f} mins"
    else:
        learn_str = f"{learn_secs:.1f} secs"

    # --- Output ---
    print()
    header = (
        f"| {'Corpus Size':14} | {'Merges':8} | {'Learning Time':14} "
        f"| {'Decoding Throughput':19} | {'Compression Ratio':17} | {'Size Reduction':14} |"
    )
    sep = (
        f"| {'-' * 14} | {'-' * 8} | {'-' * 14} "
        f"| {'-' * 19} | {'-' * 17} | {'-' * 14} |"
    )
    row = (
        f"| {f'{corpus_mb:.2f} MB':14} | {args.merges:8,} | {learn_str:14} "
        f"| {f'{decode_mtps:.1f}M tokens/sec':19} "
        f"| {f'{compression_ratio:.2f}x':17} | {f'{size_reduction:.1f}%':14} |"
    )
    print(header)
    print(sep)
    print(row)
    print()


if __name__ == "__main__":
    main()
