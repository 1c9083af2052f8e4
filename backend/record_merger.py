"""
Merge per-image extraction results of one submission
"""
import logging
from typing import Iterable, Mapping, Union

from extracted_record import ExtractedRecord, clean_value

logger = logging.getLogger(__name__)


def merge_records(records: Iterable[Union[ExtractedRecord, Mapping]]) -> ExtractedRecord:
    """
    First non-empty value wins, field by field, in the order given.

    Order is significant: pass the front image before the back image (or page 1
    before page 2). No voting and no preference for longer values.
    """
    merged = {}
    count = 0
    for record in records:
        count += 1
        values = record.to_dict() if isinstance(record, ExtractedRecord) else dict(record or {})
        for name in ExtractedRecord.field_names():
            if merged.get(name) is None:
                value = clean_value(values.get(name))
                if value is not None:
                    merged[name] = value

    logger.debug("Merged %d record(s) into %d field(s)", count, len(merged))
    return ExtractedRecord(**merged)
