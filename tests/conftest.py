"""Test configuration for pytest.

This module imports fixtures that should be available to all tests.
"""

# Import fixtures
from tests.fixtures.common import (  # noqa
    config,
    mock_ledger,
    mock_submitter,
    owner,
    mint,
    other_mint,
    sample_signature,
    sample_transfer_transaction,
)
