# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Reference data loading: wards, contractors and the SLA table.

Reference data is read once at process start and is immutable afterwards.
Updating it is an administrative concern handled outside the engine.
"""

import json
import logging
from pathlib import Path
from typing import Optional, Union
from pydantic import ValidationError as PydanticValidationError

from models.reference import ReferenceData, default_reference_data
from domain.errors import ValidationError

logger = logging.getLogger(__name__)


def load_reference_data(path: Optional[Union[str, Path]] = None) -> ReferenceData:
    """
    Load reference data from a JSON file, or the built-in tables.

    Args:
        path: JSON file path; None selects the built-in tables

    Returns:
        Validated, frozen ReferenceData

    Raises:
        ValidationError: file content does not describe valid reference data
        OSError: file cannot be read
    """
    if path is None:
        reference_data = default_reference_data()
        logger.info(
            "Using built-in reference data",
            extra={"zones": len(reference_data.zones), "contractors": len(reference_data.contractors)}
        )
        return reference_data

    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        logger.error(f"Reference data file is not valid JSON: {path}: {e}")
        raise ValidationError(f"Reference data file is not valid JSON: {path}", [str(e)])

    try:
        reference_data = ReferenceData.model_validate(raw)
    except PydanticValidationError as e:
        errors = [f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()]
        logger.error(f"Invalid reference data in {path}", extra={"validation_errors": errors})
        raise ValidationError(f"Invalid reference data in {path}", errors)

    logger.info(
        f"Loaded reference data from {path}",
        extra={"zones": len(reference_data.zones), "contractors": len(reference_data.contractors)}
    )
    return reference_data
