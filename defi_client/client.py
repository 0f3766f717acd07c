"""
DefiClient: entry point that wires the registry, ledger, signer, approval
injector, gas estimator and batch executor together.

    client = DefiClient.from_config(config)
    client.approve_proxy(Coin.DAI, size)
    actions = client.compound().supply_actions(Web3.to_wei(1, 'ether'), Coin.ETH)
    actions.add(client.uniswap().swap_actions(size, Coin.DAI, Coin.ETH))
    client.execute_actions(actions)
"""

from typing import Optional

from web3 import Web3
from eth_account import Account
from eth_account.signers.local import LocalAccount

from config.config import Config
from defi_client.actions import ActionBatch, CombinedBatch
from defi_client.approvals import ApprovalInjector
from defi_client.constants import APPROVE_GAS_LIMIT, DEFAULT_BATCH_GAS_LIMIT, DEFAULT_GAS_LOOKBACK_BLOCKS
from defi_client.dex_actions import (
    BalancerActions, CurveActions, KyberswapActions, SushiswapActions, UniswapActions,
)
from defi_client.errors import ExecutionFailure, InvalidArgument
from defi_client.executor import BatchExecutor, ExecutionResult
from defi_client.funds_actions import FundsActions
from defi_client.gas import GasPriceEstimator
from defi_client.ledger import LedgerGateway, Receipt, Web3LedgerGateway
from defi_client.lending_actions import AaveActions, CompoundActions
from defi_client.lending_reads import AaveReader, CompoundReader, ReserveData
from defi_client.logger import setup_logger
from defi_client.maker_actions import MakerActions
from defi_client.registry import MAINNET, AddressRegistry, Coin, registry_for_network
from defi_client.yearn_actions import YearnActions

logger = setup_logger(__name__)


class DefiClient:
    def __init__(self, ledger: LedgerGateway, account: LocalAccount,
                 registry: AddressRegistry = MAINNET,
                 gas_limit: int = DEFAULT_BATCH_GAS_LIMIT,
                 max_gas_lookback: int = DEFAULT_GAS_LOOKBACK_BLOCKS,
                 strict_approvals: bool = False):
        self.ledger = ledger
        self.account = account
        self.registry = registry

        self.gas_estimator = GasPriceEstimator(ledger, max_lookback=max_gas_lookback)
        self.approval_injector = ApprovalInjector(
            ledger, registry, account.address, strict=strict_approvals
        )
        self.compound_reader = CompoundReader(ledger, registry)
        self.aave_reader = AaveReader(ledger, registry)
        self.executor = BatchExecutor(
            ledger, account, self.approval_injector, self.gas_estimator,
            proxy_address=registry.proxy, gas_limit=gas_limit,
        )

    @classmethod
    def from_config(cls, cfg: Config) -> 'DefiClient':
        """RPC, 키, 네트워크 설정으로 클라이언트 생성"""
        if not cfg.validate():
            raise InvalidArgument(
                f"RPC endpoint and PRIVATE_KEY must be configured for a supported network: {cfg.network}"
            )

        w3 = Web3(Web3.HTTPProvider(cfg.rpc_url()))
        account = Account.from_key(cfg.private_key)
        registry = registry_for_network(cfg.network, proxy_override=cfg.proxy_address or None)
        logger.info(f"DefiClient 초기화: network={registry.network}, account={account.address}")

        return cls(
            Web3LedgerGateway(w3, receipt_timeout=cfg.receipt_timeout_sec),
            account,
            registry=registry,
            gas_limit=cfg.batch_gas_limit,
            max_gas_lookback=cfg.gas_lookback_blocks,
            strict_approvals=cfg.strict_approvals,
        )

    # protocol builders

    def uniswap(self) -> UniswapActions:
        return UniswapActions(self.registry)

    def sushiswap(self) -> SushiswapActions:
        return SushiswapActions(self.registry)

    def kyberswap(self) -> KyberswapActions:
        return KyberswapActions(self.registry)

    def balancer(self) -> BalancerActions:
        return BalancerActions(self.registry)

    def curve(self) -> CurveActions:
        return CurveActions(self.registry)

    def compound(self) -> CompoundActions:
        return CompoundActions(self.registry)

    def aave(self) -> AaveActions:
        return AaveActions(self.registry)

    def yearn(self) -> YearnActions:
        return YearnActions(self.registry)

    def maker(self) -> MakerActions:
        return MakerActions(self.registry)

    def funds(self) -> FundsActions:
        return FundsActions(self.registry)

    def supply_fund_actions(self, size: int, coin: Coin) -> ActionBatch:
        return self.funds().supply_fund_actions(size, coin)

    # ledger / execution

    def balance_of(self, coin: Coin) -> int:
        """Caller's balance of ``coin`` (ETH reads the WETH balance)."""
        return self.ledger.balance_of(self.registry.token(coin), self.account.address)

    def compound_balance_of(self, coin: Coin) -> int:
        return self.compound_reader.balance_of(coin, self.account.address)

    def compound_balance_of_underlying(self, coin: Coin) -> int:
        return self.compound_reader.balance_of_underlying(coin, self.account.address)

    def aave_user_reserve_data(self, coin: Coin, user: Optional[str] = None) -> ReserveData:
        return self.aave_reader.user_reserve_data(coin, user or self.account.address)

    def approve(self, coin: Coin, spender: str, size: int,
                gas_price: Optional[int] = None) -> Receipt:
        """Grant ``spender`` an ERC-20 allowance of ``size`` in its own transaction.

        Batches with approval requirements pull tokens from the caller
        through the proxy, so the proxy needs an allowance first (see
        ``approve_proxy``).
        """
        if not isinstance(size, int) or isinstance(size, bool) or size < 0:
            raise InvalidArgument(f"size must be a non-negative int: {size!r}")
        if gas_price is None:
            gas_price = self.gas_estimator.suggest_gas_price()

        token = self.registry.token(coin)
        logger.info(f"approve 전송: {coin.value} {size} -> {spender}")
        receipt = self.ledger.approve(
            self.account, token, spender, size, gas_price=gas_price, gas_limit=APPROVE_GAS_LIMIT,
        )
        if not receipt.succeeded:
            logger.error(f"approve 실패 (status={receipt.status}): {receipt.tx_hash}")
            raise ExecutionFailure(
                f"approve tx {receipt.tx_hash} receipt status is {receipt.status}",
                receipt=receipt,
            )
        return receipt

    def approve_proxy(self, coin: Coin, size: int, gas_price: Optional[int] = None) -> Receipt:
        return self.approve(coin, self.registry.proxy, size, gas_price=gas_price)

    def suggest_gas_price(self, block_number: Optional[int] = None) -> int:
        return self.gas_estimator.suggest_gas_price(block_number)

    def combine_actions(self, actions: ActionBatch) -> CombinedBatch:
        """Targets, payloads and total value exactly as they will be submitted."""
        return self.approval_injector.inject(actions)

    def execute_actions(self, actions: ActionBatch) -> ExecutionResult:
        return self.executor.execute(actions)

    def execute_actions_with_gas_price(self, actions: ActionBatch, gas_price: int) -> ExecutionResult:
        return self.executor.execute(actions, gas_price=gas_price)
