"""Unit tests for startup schema push in the container."""

from unittest.mock import patch

import pytest

from relauthz.core import container
from relauthz.infrastructure.authorization.spicedb_adapter import SpiceDBAdapter


@pytest.fixture
def wired(fake_spicedb, mock_logger):
    adapter = SpiceDBAdapter(client=fake_spicedb, logger=mock_logger)
    with (
        patch.object(container, "get_authorization", return_value=adapter),
        patch.object(container, "get_logger", return_value=mock_logger),
    ):
        yield adapter


@pytest.mark.unit
class TestInitAuthorization:
    """Test init_authorization."""

    async def test_pushes_bundled_schema(self, wired, fake_spicedb, mock_logger):
        with patch.object(container.settings, "spicedb_schema_path", None):
            authz = await container.init_authorization()

        assert authz is wired
        assert "definition organization" in fake_spicedb.schema
        assert mock_logger.info.call_args.args[0] == "authorization_initialized"

    async def test_pushes_schema_from_path(self, wired, fake_spicedb, tmp_path):
        schema_file = tmp_path / "schema.zed"
        schema_file.write_text("definition user {}", encoding="utf-8")

        with patch.object(container.settings, "spicedb_schema_path", str(schema_file)):
            await container.init_authorization()

        assert fake_spicedb.schema == "definition user {}"

    async def test_schema_failure_raises(self, wired, fake_spicedb):
        fake_spicedb.fail_next("WriteSchema")

        with patch.object(container.settings, "spicedb_schema_path", None):
            with pytest.raises(RuntimeError, match="schema push failed"):
                await container.init_authorization()
