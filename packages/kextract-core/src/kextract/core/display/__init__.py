from __future__ import annotations

from kextract.core.display.transcript import TranscriptDisplay

__all__ = ["TranscriptDisplay"]
