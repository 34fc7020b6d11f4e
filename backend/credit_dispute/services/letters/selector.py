"""
Credit Dispute Engine - Template Selector

Maps an issue type string to a letter template.

Lookup order:
1. Exact key (stored templates override built-ins of the same key)
2. Substring match in either direction
3. A stored "general" template
4. DEFAULT_TEMPLATE
"""
from __future__ import annotations
import logging
import re
from typing import Dict, Optional

from .templates import DEFAULT_TEMPLATE, LETTER_TEMPLATES

logger = logging.getLogger(__name__)

GENERAL_TEMPLATE_KEY = "general"


def normalize_issue_type(issue_type: Optional[str]) -> str:
    """'Late-Payment Issue' -> 'late_payment_issue'"""
    normalized = re.sub(r"[\s\-]+", "_", (issue_type or "").strip().lower())
    return re.sub(r"[^a-z0-9_]", "", normalized)


def select_template(issue_type: str, stored_templates: Optional[Dict[str, str]] = None) -> str:
    """
    Pick the template for an issue type.

    Args:
        issue_type: raw issue type, normalised before lookup
        stored_templates: issue_type -> content, typically from letter_templates rows
    """
    stored = {normalize_issue_type(k): v for k, v in (stored_templates or {}).items() if v}
    candidates: Dict[str, str] = dict(LETTER_TEMPLATES)
    candidates.update({k: v for k, v in stored.items() if k != GENERAL_TEMPLATE_KEY})

    key = normalize_issue_type(issue_type)
    if key in candidates:
        return candidates[key]

    if key:
        for candidate_key, template in candidates.items():
            if candidate_key in key or key in candidate_key:
                logger.debug(f"Template substring match: {candidate_key} for issue type {issue_type}")
                return template

    if GENERAL_TEMPLATE_KEY in stored:
        return stored[GENERAL_TEMPLATE_KEY]

    logger.info(f"No template for issue type '{issue_type}', using default template")
    return DEFAULT_TEMPLATE
