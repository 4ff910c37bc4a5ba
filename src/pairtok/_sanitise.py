"""
Utilities for rendering symbol expansions as displayable strings.
"""

import regex as re

# any Unicode "Other" category character: Cc, Cf, Cs, Co, Cn
_CTRL_CHARS = re.compile(r"\p{C}")


def render_text(s: str) -> str:
    """Replace all Unicode control characters with their escape sequences."""
    return _CTRL_CHARS.sub(lambda m: f"\\u{ord(m.group()):04x}", s)
