from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from enum import StrEnum

from ...constants import Defaults
from ..exceptions import InvalidConfigError


class SimilarityMetric(StrEnum):
    DICE = "dice"
    INDEL = "indel"
    TOKEN_SET = "token_set"


@dataclass(frozen=True, slots=True)
class AutoMappingConfig:
    """Options for one matching call.

    The object is validated when it is built, so a config that exists is a
    config the worker can run. There is no module-level default instance.
    """

    confidence_threshold: float = Defaults.CONFIDENCE_THRESHOLD
    use_existing_mappings: bool = Defaults.USE_EXISTING_MAPPINGS
    use_fuzzy_matching: bool = Defaults.USE_FUZZY_MATCHING
    use_synonyms: bool = Defaults.USE_SYNONYMS
    similarity_metric: SimilarityMetric = SimilarityMetric.DICE

    def __post_init__(self) -> None:
        threshold = self.confidence_threshold
        if isinstance(threshold, bool) or not isinstance(threshold, (int, float)):
            raise InvalidConfigError(
                f"confidence_threshold must be a number, got {type(threshold).__name__}"
            )
        if not 0.0 <= threshold <= 1.0:
            raise InvalidConfigError(
                f"confidence_threshold must be between 0.0 and 1.0, got {threshold}"
            )
        for name in ("use_existing_mappings", "use_fuzzy_matching", "use_synonyms"):
            flag = getattr(self, name)
            if not isinstance(flag, bool):
                raise InvalidConfigError(
                    f"{name} must be a boolean, got {type(flag).__name__}"
                )
        try:
            metric = SimilarityMetric(self.similarity_metric)
        except ValueError as exc:
            raise InvalidConfigError(
                f"Unknown similarity_metric: {self.similarity_metric!r}"
            ) from exc
        object.__setattr__(self, "similarity_metric", metric)
        object.__setattr__(self, "confidence_threshold", float(threshold))

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> AutoMappingConfig:
        """Build a config from a message payload, accepting camelCase keys."""
        aliases = {
            "confidenceThreshold": "confidence_threshold",
            "threshold": "confidence_threshold",
            "useExistingMappings": "use_existing_mappings",
            "useExisting": "use_existing_mappings",
            "useFuzzyMatching": "use_fuzzy_matching",
            "useFuzzy": "use_fuzzy_matching",
            "useSynonyms": "use_synonyms",
            "similarityMetric": "similarity_metric",
        }
        known = {
            "confidence_threshold",
            "use_existing_mappings",
            "use_fuzzy_matching",
            "use_synonyms",
            "similarity_metric",
        }
        values: dict[str, object] = {}
        for key, value in data.items():
            name = aliases.get(key, key)
            if name not in known:
                raise InvalidConfigError(f"Unknown config option: {key!r}")
            values[name] = value
        return cls(**values)  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["similarity_metric"] = self.similarity_metric.value
        return data
