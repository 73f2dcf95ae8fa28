"""Four-layer validation gate for generated fragments.

Layers run in a fixed order for every fragment and never stop early:

1. XML well-formedness (:mod:`.xml_layer`)
2. Structure, size, and naming (:mod:`.schema_layer`)
3. Injection pattern screening (:mod:`.security_layer`)
4. Navigation and cross-page integrity (:mod:`.integration_layer`)

Each check returns a list of :class:`Violation` records; the results are
concatenated into a :class:`ValidationReport` whose ``ok`` flag gates
publishing.
"""

from .integration_layer import check_page_integration, check_run_integration
from .models import Layer, PageError, PageValidation, ValidationReport, Violation
from .runner import validate_batch, validate_fragment, validate_run
from .schema_layer import check_fragment_count, check_schema
from .security_layer import check_security
from .xml_layer import check_well_formed

__all__ = [
    "Layer",
    "PageError",
    "PageValidation",
    "ValidationReport",
    "Violation",
    "check_fragment_count",
    "check_page_integration",
    "check_run_integration",
    "check_schema",
    "check_security",
    "check_well_formed",
    "validate_batch",
    "validate_fragment",
    "validate_run",
]
