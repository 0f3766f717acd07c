import pytest
from web3 import Web3

from config.config import SUPPORTED_NETWORKS as CONFIG_NETWORKS
from defi_client.abi_utils import (
    decode_result, encode_call, parse_signature, strip_selector, to_checksum,
)
from defi_client.errors import EncodingError, InvalidArgument
from defi_client.registry import MAINNET, SUPPORTED_NETWORKS, Coin, Handler, ilk, registry_for_network

OTHER_PROXY = "0x1111111111111111111111111111111111111111"


class TestAddressRegistry:

    def test_addresses_are_checksummed(self):
        dai = MAINNET.token(Coin.DAI)
        assert dai == Web3.to_checksum_address(dai)
        assert MAINNET.proxy == MAINNET.handler(Handler.PROXY)

    def test_eth_resolves_to_weth(self):
        assert MAINNET.token(Coin.ETH).lower() == "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"

    def test_missing_entries_raise(self):
        with pytest.raises(InvalidArgument):
            MAINNET.compound_market(Coin.ZRX)
        with pytest.raises(InvalidArgument):
            MAINNET.maker_ilk(Coin.DAI)

    def test_mappings_are_read_only(self):
        with pytest.raises(TypeError):
            MAINNET.tokens[Coin.DAI] = OTHER_PROXY

    def test_proxy_override_leaves_mainnet_alone(self):
        registry = registry_for_network('MAINNET', proxy_override=OTHER_PROXY)

        assert registry.proxy == Web3.to_checksum_address(OTHER_PROXY)
        assert MAINNET.proxy != registry.proxy
        assert registry.handler(Handler.FUNDS) == MAINNET.handler(Handler.FUNDS)

    def test_unknown_network(self):
        with pytest.raises(InvalidArgument):
            registry_for_network('ropsten')

    def test_mainnet_fork_shares_mainnet_addresses(self):
        fork = registry_for_network('mainnet-fork')

        assert fork.network == 'mainnet-fork'
        assert fork.handlers == MAINNET.handlers
        assert fork.maker_ilk(Coin.ETH) == MAINNET.maker_ilk(Coin.ETH)

    def test_config_networks_have_registries(self):
        assert set(CONFIG_NETWORKS) == set(SUPPORTED_NETWORKS)

    def test_ilk_padding(self):
        assert ilk("ETH-A") == b"ETH-A" + b"\x00" * 27
        with pytest.raises(InvalidArgument):
            ilk("X" * 33)


class TestAbiUtils:

    def test_parse_signature(self):
        assert parse_signature("batchExec(address[],bytes[])") == ("batchExec", ["address[]", "bytes[]"])
        assert parse_signature("kill()") == ("kill", [])

    def test_malformed_signature(self):
        with pytest.raises(EncodingError):
            parse_signature("batchExec")

    def test_argument_count_mismatch(self):
        with pytest.raises(EncodingError):
            encode_call("mint(uint256)", [1, 2])

    def test_unencodable_value(self):
        with pytest.raises(EncodingError):
            encode_call("mint(uint256)", [-1])

    def test_decode_result(self):
        assert decode_result(["uint256"], b"\x00" * 31 + b"\x2a") == (42,)
        with pytest.raises(EncodingError):
            decode_result(["uint256"], b"\x2a")

    def test_strip_selector_needs_four_bytes(self):
        assert strip_selector(b"\x01\x02\x03\x04\x05") == b"\x05"
        with pytest.raises(EncodingError):
            strip_selector(b"\x01\x02")

    def test_to_checksum_rejects_garbage(self):
        with pytest.raises(InvalidArgument):
            to_checksum("0x1234")
        with pytest.raises(InvalidArgument):
            to_checksum(None)
