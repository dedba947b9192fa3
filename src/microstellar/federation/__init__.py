"""Federation — resolve ``name*domain`` addresses to account IDs."""

from microstellar.federation.client import FederationClient
from microstellar.federation.models import FederatedAddress, FederationRecord

__all__ = ["FederatedAddress", "FederationClient", "FederationRecord"]
