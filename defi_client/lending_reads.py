"""
Read-only views on lending positions: Compound cToken balances and Aave V1
per-user reserve data. These go straight to the protocol contracts through
``LedgerGateway.call``; nothing is submitted.
"""

from dataclasses import dataclass

from defi_client.abi_utils import decode_result, encode_call, to_checksum
from defi_client.constants import ETH_NATIVE_ADDRESS
from defi_client.ledger import LedgerGateway
from defi_client.logger import setup_logger
from defi_client.registry import AddressRegistry, Coin, Handler

logger = setup_logger(__name__)

BALANCE_OF_UNDERLYING_SIGNATURE = "balanceOfUnderlying(address)"
USER_RESERVE_DATA_SIGNATURE = "getUserReserveData(address,address)"
USER_RESERVE_DATA_TYPES = ["uint256"] * 9 + ["bool"]


@dataclass
class ReserveData:
    """Aave 사용자 reserve 상태"""
    current_atoken_balance: int
    current_borrow_balance: int
    principal_borrow_balance: int
    borrow_rate_mode: int
    borrow_rate: int
    liquidity_rate: int
    origination_fee: int
    variable_borrow_index: int
    last_update_timestamp: int
    usage_as_collateral_enabled: bool


class CompoundReader:
    def __init__(self, ledger: LedgerGateway, registry: AddressRegistry):
        self.ledger = ledger
        self.registry = registry

    def balance_of(self, coin: Coin, owner: str) -> int:
        """cToken balance of ``owner`` in ``coin``'s market."""
        return self.ledger.balance_of(self.registry.compound_market(coin), owner)

    def balance_of_underlying(self, coin: Coin, owner: str) -> int:
        """Underlying amount ``owner``'s cTokens redeem for, interest included."""
        market = self.registry.compound_market(coin)
        # balanceOfUnderlying 은 view 가 아니지만 eth_call 로 결과만 읽는다
        raw = self.ledger.call(market, encode_call(BALANCE_OF_UNDERLYING_SIGNATURE, [to_checksum(owner)]))
        (amount,) = decode_result(["uint256"], raw)
        return amount


class AaveReader:
    def __init__(self, ledger: LedgerGateway, registry: AddressRegistry):
        self.ledger = ledger
        self.registry = registry

    def reserve_address(self, coin: Coin) -> str:
        # Aave V1 은 ETH reserve 를 플레이스홀더 주소로 표현
        if coin == Coin.ETH:
            return ETH_NATIVE_ADDRESS
        return self.registry.token(coin)

    def user_reserve_data(self, coin: Coin, user: str) -> ReserveData:
        pool = self.registry.handler(Handler.AAVE_LENDING_POOL)
        data = encode_call(USER_RESERVE_DATA_SIGNATURE, [self.reserve_address(coin), to_checksum(user)])
        values = decode_result(USER_RESERVE_DATA_TYPES, self.ledger.call(pool, data))
        logger.debug(f"Aave reserve data {coin.value} user={user}: aToken={values[0]}")
        return ReserveData(*values)
