# Area: Permits
"""
Permits - Off-chain query authorization.

This package handles:
- Building the fixed-field permit sign doc
- Signing and caching permits per signer
- Wrapping queries in the with_permit envelope
"""

from .issuer import (
    PermitIssuer,
    authorized_query,
    build_permit_sign_doc,
)
from .queries import (
    community_cards_query,
    player_cards_query,
    player_private_data_query,
    showdown_query,
)
