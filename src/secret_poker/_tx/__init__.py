# Area: Transactions
"""
Transactions - Submission and settlement decoding.

This package handles:
- Rendering actions into execute messages
- Atomic batch submission, one in-flight submission per sender
- Mapping ledger failures to typed errors
- Decoding the contract's replies from settlement logs
"""

from .decoder import decode, parse_query_reply, parse_response, reply_kind
from .executor import TxExecutor, expected_responses, is_out_of_gas
from .gas import estimate_gas_limit
