"""FlowOffice integration clients."""

from flowoffice.integrations.base import BaseIntegration
from flowoffice.integrations.flowoffice import FlowOfficeClient

__all__ = [
    "BaseIntegration",
    "FlowOfficeClient",
]
