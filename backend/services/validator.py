"""Structural checks on a parsed matchup before it is handed to arithmetic."""
import logging
from typing import List, Optional
from dataclasses import dataclass, field

from services.matchup_parser import ParsedMatchup

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": list(self.errors)}


def validate_parsed_matchup(parsed: Optional[ParsedMatchup]) -> ValidationResult:
    """
    Confirm the pick team, opponent team, league and spread are all present.

    Does not re-parse or second-guess values; a spread of 0 is present.
    """
    if parsed is None:
        return ValidationResult(valid=False, errors=["Missing parsed matchup"])

    errors = []
    if parsed.pick_team is None:
        errors.append("Missing pick team")
    if parsed.opponent_team is None:
        errors.append("Missing opponent team")
    if parsed.league is None:
        errors.append("Missing league")
    if parsed.spread is None:
        errors.append("Missing spread")

    if errors:
        logger.debug(f"Matchup failed validation: {', '.join(errors)}")
    return ValidationResult(valid=not errors, errors=errors)
