"""Explicit-content scanning over the media catalogue.

Three operations share one verdict pipeline:

  scan_all        -- sweep every record of the configured media types with
                     the regex classifier and flag the matches
  scan_single     -- same verdict for one record
  analyze_lyrics  -- AI classification of free text, with the regex
                     classifier as the parse-failure fallback

The only write this service performs is ``mark_explicit`` (False -> True).
A record is never un-flagged, so re-running any operation is safe: an
interrupted sweep leaves earlier records flagged and the rest untouched,
and the next sweep picks up where it left off.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from onelove.interfaces.classifier import IExplicitContentClassifier
from onelove.interfaces.content_store import IContentStore
from onelove.models.media import MediaType, build_scan_text
from onelove.models.moderation import ScanAllResult, ScannedItem, ScanSingleResult, Verdict
from onelove.providers.classifier.pattern_classifier import PatternClassifier
from onelove.utils.errors import NotFoundError, ValidationError

logger = structlog.get_logger(logger_name=__name__)


class ContentScanner:
    """Flags explicit media records in the content store.

    Parameters
    ----------
    store:
        Backend holding the media catalogue.
    pattern_classifier:
        Regex classifier used for catalogue sweeps and as the AI fallback.
    ai_classifier:
        Optional AI-backed classifier.  ``None`` when no gateway credential
        is configured, in which case ``analyze_lyrics`` is unavailable.
    media_types:
        Media types swept by :meth:`scan_all`.
    """

    def __init__(
        self,
        store: IContentStore,
        pattern_classifier: PatternClassifier,
        ai_classifier: IExplicitContentClassifier | None = None,
        media_types: Sequence[MediaType | str] = (MediaType.TRACK,),
    ) -> None:
        self._store = store
        self._patterns = pattern_classifier
        self._ai = ai_classifier
        self._media_types = tuple(MediaType(t) for t in media_types)

    @property
    def ai_enabled(self) -> bool:
        return self._ai is not None

    async def scan_all(self) -> ScanAllResult:
        """Sweep the catalogue and flag every record whose text matches.

        Records that are already explicit are counted but not re-written,
        so a second sweep over unchanged data reports zero new flags.
        """
        records = await self._store.list_media(self._media_types)
        flagged: list[ScannedItem] = []

        for record in records:
            if record.is_explicit:
                continue
            if not self._patterns.is_explicit(record.scan_text()):
                continue
            await self._store.mark_explicit(record.id)
            flagged.append(ScannedItem(id=record.id, title=record.title))

        logger.info(
            "explicit_scan_complete",
            media_types=[t.value for t in self._media_types],
            scanned=len(records),
            marked_explicit=len(flagged),
        )
        return ScanAllResult(
            success=True,
            scanned=len(records),
            marked_explicit=len(flagged),
            results=flagged,
        )

    async def scan_single(self, media_id: str) -> ScanSingleResult:
        """Classify one record and flag it when explicit."""
        if not media_id:
            raise ValidationError(message="trackId is required")

        record = await self._store.get_media(media_id)
        if record is None:
            raise NotFoundError(message=f"Track {media_id} not found")

        is_explicit = self._patterns.is_explicit(
            build_scan_text(record.title, record.description)
        )
        if is_explicit:
            await self._store.mark_explicit(record.id)

        logger.info(
            "explicit_scan_single",
            media_id=record.id,
            is_explicit=is_explicit,
            previously_flagged=record.is_explicit,
        )
        return ScanSingleResult(
            id=record.id,
            title=record.title,
            is_explicit=is_explicit,
            updated=is_explicit,
        )

    async def analyze_lyrics(self, text: str, media_id: str | None = None) -> Verdict:
        """Ask the AI classifier about ``text``; flag ``media_id`` when explicit."""
        if self._ai is None:
            raise ValidationError(message="Invalid action")
        if not isinstance(text, str) or not text.strip():
            raise ValidationError(message="text is required")

        verdict = await self._ai.classify(text)

        if verdict.is_explicit and media_id:
            await self._store.mark_explicit(media_id)

        logger.info(
            "lyrics_analyzed",
            classifier=self._ai.get_classifier_name(),
            is_explicit=verdict.is_explicit,
            media_id=media_id,
        )
        return verdict
