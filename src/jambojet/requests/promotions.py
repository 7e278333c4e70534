"""Promotion lookups.

The promotions endpoint takes PascalCase query parameters, unlike the rest of
the API.
"""

from dataclasses import dataclass
from typing import Any, Final, Self

from jambojet.core.types import Payload
from jambojet.requests.base import BaseRequest, filter_nulls
from jambojet.validation.formats import is_datetime
from jambojet.validation.structural import check_string_lengths, fail

MATCH_STARTS_WITH: Final = 0
MATCH_ENDS_WITH: Final = 1
MATCH_CONTAINS: Final = 2
MATCH_EXACT: Final = 3
MATCHING_MODES: Final = (MATCH_STARTS_WITH, MATCH_ENDS_WITH, MATCH_CONTAINS, MATCH_EXACT)


def _check_matching(value: int | None, path: str) -> None:
    if value is None:
        return
    if not isinstance(value, int) or isinstance(value, bool) or value not in MATCHING_MODES:
        fail(
            path,
            f"{path} must be 0 (StartsWith), 1 (EndsWith), 2 (Contains), or 3 (ExactMatch)",
        )


@dataclass(frozen=True)
class PromotionSearchRequest(BaseRequest):
    promotion_code: str | None = None
    organization_code: str | None = None
    effective_date: str | None = None
    culture_code: str | None = None
    promotion_code_matching: int | None = None
    organization_code_matching: int | None = None

    def to_payload(self) -> Payload:
        return filter_nulls(
            {
                "PromotionCode": self.promotion_code,
                "OrganizationCode": self.organization_code,
                "EffectiveDate": self.effective_date,
                "CultureCode": self.culture_code,
                "PromotionCodeMatching": self.promotion_code_matching,
                "OrganizationCodeMatching": self.organization_code_matching,
            }
        )

    def validate(self) -> None:
        check_string_lengths(
            self.to_payload(), {"PromotionCode": (0, 8), "OrganizationCode": (0, 10)}
        )
        if self.effective_date is not None and not is_datetime(self.effective_date):
            fail("EffectiveDate", "EffectiveDate must be a valid ISO 8601 datetime format")
        _check_matching(self.promotion_code_matching, "PromotionCodeMatching")
        _check_matching(self.organization_code_matching, "OrganizationCodeMatching")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Accept either the PascalCase wire names or camelCase ones."""

        def pick(name: str) -> Any:
            wire_name = name[0].upper() + name[1:]
            return data.get(wire_name, data.get(name))

        return cls(
            promotion_code=pick("promotionCode"),
            organization_code=pick("organizationCode"),
            effective_date=pick("effectiveDate"),
            culture_code=pick("cultureCode"),
            promotion_code_matching=pick("promotionCodeMatching"),
            organization_code_matching=pick("organizationCodeMatching"),
        )

    @classmethod
    def by_code(cls, code: str) -> Self:
        return cls(promotion_code=code, promotion_code_matching=MATCH_EXACT)

    @classmethod
    def by_organization(cls, organization_code: str) -> Self:
        return cls(organization_code=organization_code, organization_code_matching=MATCH_EXACT)

    @classmethod
    def active_at(cls, effective_date: str) -> Self:
        return cls(effective_date=effective_date)

    def with_promotion_matching(self, matching: int) -> Self:
        return self._replace(promotion_code_matching=matching)

    def with_organization_matching(self, matching: int) -> Self:
        return self._replace(organization_code_matching=matching)
