import pytest
from eth_abi import encode

from conftest import FakeLedger, decode_call, selector
from defi_client.constants import ETH_NATIVE_ADDRESS
from defi_client.errors import EncodingError, InvalidArgument
from defi_client.lending_reads import AaveReader, CompoundReader, ReserveData
from defi_client.registry import Coin, Handler

USER = "0x19e7e376e7c213b7e7e7e46cc70a5dd086daff2a"

RESERVE_VALUES = [500, 20, 18, 2, 3_000, 1_500, 7, 10**27, 1_600_000_000, True]


class TestCompoundReader:

    def test_balance_of_reads_market(self, registry):
        ledger = FakeLedger(balances={registry.compound_market(Coin.DAI): 123})

        assert CompoundReader(ledger, registry).balance_of(Coin.DAI, USER) == 123
        assert ledger.balance_reads[0][0] == registry.compound_market(Coin.DAI)

    def test_eth_balance_reads_ceth(self, registry):
        ledger = FakeLedger(balances={registry.compound_market(Coin.ETH): 9})

        assert CompoundReader(ledger, registry).balance_of(Coin.ETH, USER) == 9

    def test_balance_of_underlying(self, registry):
        market = registry.compound_market(Coin.USDC)
        ledger = FakeLedger(call_results={market: encode(["uint256"], [4_200])})

        assert CompoundReader(ledger, registry).balance_of_underlying(Coin.USDC, USER) == 4_200

        to, data = ledger.calls[0]
        assert to == market
        assert data[:4] == selector("balanceOfUnderlying(address)")
        assert decode_call(["address"], data)[0].lower() == USER

    def test_unsupported_market(self, registry):
        with pytest.raises(InvalidArgument):
            CompoundReader(FakeLedger(), registry).balance_of(Coin.ZRX, USER)

    def test_short_return_data(self, registry):
        market = registry.compound_market(Coin.DAI)
        ledger = FakeLedger(call_results={market: b"\x01"})

        with pytest.raises(EncodingError):
            CompoundReader(ledger, registry).balance_of_underlying(Coin.DAI, USER)


class TestAaveReader:

    @pytest.fixture
    def ledger(self, registry):
        pool = registry.handler(Handler.AAVE_LENDING_POOL)
        raw = encode(["uint256"] * 9 + ["bool"], RESERVE_VALUES)
        return FakeLedger(call_results={pool: raw})

    def test_user_reserve_data(self, ledger, registry):
        data = AaveReader(ledger, registry).user_reserve_data(Coin.DAI, USER)

        assert data == ReserveData(*RESERVE_VALUES)
        assert data.current_atoken_balance == 500
        assert data.usage_as_collateral_enabled is True

        to, call_data = ledger.calls[0]
        assert to == registry.handler(Handler.AAVE_LENDING_POOL)
        assert call_data[:4] == selector("getUserReserveData(address,address)")
        reserve, user = decode_call(["address", "address"], call_data)
        assert reserve.lower() == registry.token(Coin.DAI).lower()
        assert user.lower() == USER

    def test_eth_reserve_uses_placeholder(self, ledger, registry):
        AaveReader(ledger, registry).user_reserve_data(Coin.ETH, USER)

        reserve, _ = decode_call(["address", "address"], ledger.calls[0][1])
        assert reserve.lower() == ETH_NATIVE_ADDRESS.lower()
