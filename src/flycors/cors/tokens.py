# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Comma-separated token lists, parsed once and queried per request."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass


def split_tokens(value: str | Sequence[str] | None) -> list[str]:
    """Split a comma-separated value into trimmed, non-empty tokens.

    A pre-split sequence (e.g. a YAML list) is trimmed entry by entry.
    ``None`` and blank strings give an empty list.
    """
    if value is None:
        return []
    parts = value.split(",") if isinstance(value, str) else [str(v) for v in value]
    return [token for token in (p.strip() for p in parts) if token]


@dataclass(frozen=True)
class TokenList:
    """Ordered tokens kept in their original case, with a case-folded lookup set.

    The original spelling is what gets echoed back in response headers;
    ``folded`` answers case-insensitive membership.
    """

    values: tuple[str, ...] = ()
    folded: frozenset[str] = frozenset()

    @classmethod
    def parse(cls, value: str | Sequence[str] | None) -> TokenList:
        tokens = tuple(split_tokens(value))
        return cls(values=tokens, folded=frozenset(t.lower() for t in tokens))

    def contains(self, token: str) -> bool:
        """Case-insensitive membership test. *token* is compared as given, untrimmed."""
        return token.lower() in self.folded

    def joined(self) -> str:
        return ",".join(self.values)

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)
