"""
Core types for tokenization.
"""

from collections.abc import Mapping
from typing import TypeAlias

TokenId: TypeAlias = int
TokenStr: TypeAlias = str
Forward: TypeAlias = Mapping[TokenStr, TokenId]
Backward: TypeAlias = Mapping[TokenId, TokenStr]
