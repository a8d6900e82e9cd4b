import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from .models import (
    TRAIT_NAMES,
    BusinessModelCatalogConfig,
    BusinessModelDefinition,
    CatalogValidationError,
    QuizResponse,
)

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parents[2] / "assets" / "business_models.yml"


class BusinessModelCatalog:
    """
    Read-only, ordered collection of business-model definitions.
    Iteration order is the file order and is the ranking tie-break order.
    """

    def __init__(self, config: BusinessModelCatalogConfig):
        self.version = config.version
        self._models: Tuple[BusinessModelDefinition, ...] = tuple(config.business_models)
        self._by_id: Dict[str, BusinessModelDefinition] = {m.id: m for m in self._models}

    def __iter__(self) -> Iterator[BusinessModelDefinition]:
        return iter(self._models)

    def __len__(self) -> int:
        return len(self._models)

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._by_id

    @property
    def models(self) -> Tuple[BusinessModelDefinition, ...]:
        return self._models

    def ids(self) -> List[str]:
        return [m.id for m in self._models]

    def get(self, model_id: str) -> Optional[BusinessModelDefinition]:
        return self._by_id.get(model_id)

    def position(self, model_id: str) -> int:
        return self.ids().index(model_id)

    def categories(self) -> List[str]:
        seen = []
        for model in self._models:
            if model.category not in seen:
                seen.append(model.category)
        return seen


def _validate_catalog(config: BusinessModelCatalogConfig) -> None:
    """Checks the rules pydantic cannot express: unique ids and known field names."""
    if not config.business_models:
        raise CatalogValidationError("Catalog defines no business models")

    answer_fields = set(QuizResponse.model_fields)
    model_ids = set()
    for model in config.business_models:
        if model.id in model_ids:
            raise CatalogValidationError(f"Duplicate business model ID found: {model.id}")
        model_ids.add(model.id)

        if not model.ideal_profile.traits:
            raise CatalogValidationError(f"Business model '{model.id}' has no trait affinities")
        for trait in model.ideal_profile.traits:
            if trait not in TRAIT_NAMES:
                raise CatalogValidationError(f"Unknown trait '{trait}' in business model '{model.id}'")
        for adjustment in model.ideal_profile.adjustments:
            if adjustment.field not in answer_fields:
                raise CatalogValidationError(
                    f"Unknown quiz field '{adjustment.field}' in adjustments of business model '{model.id}'"
                )


def load_catalog_data(data: Dict[str, Any]) -> BusinessModelCatalog:
    try:
        config = BusinessModelCatalogConfig.model_validate(data)
    except ValidationError as e:
        raise CatalogValidationError(f"Invalid business model catalog: {e}") from e
    _validate_catalog(config)
    return BusinessModelCatalog(config)


def load_catalog_from_file(file_path: str) -> BusinessModelCatalog:
    """
    Loads the business-model catalog from a YAML file, validates it,
    and returns a BusinessModelCatalog.
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise CatalogValidationError(f"File not found: {file_path}")
    except yaml.YAMLError as e:
        raise CatalogValidationError(f"Error parsing YAML file {file_path}: {e}")

    if data is None:
        raise CatalogValidationError(f"YAML file is empty or invalid: {file_path}")

    catalog = load_catalog_data(data)
    logger.info(f"Loaded business model catalog v{catalog.version} with {len(catalog)} models from {file_path}")
    return catalog


@lru_cache(maxsize=None)
def get_catalog(file_path: str = str(DEFAULT_CATALOG_PATH)) -> BusinessModelCatalog:
    """Process-wide catalog, loaded once per path."""
    return load_catalog_from_file(file_path)
