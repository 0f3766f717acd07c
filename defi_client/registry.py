"""
Per-network address registry.

Token, market, vault, proxy and handler addresses are held in one immutable
object that is passed into every builder, so mainnet and test deployments can
coexist in one process.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional

from defi_client.abi_utils import to_checksum
from defi_client.errors import InvalidArgument


class Coin(Enum):
    """Supported assets"""
    ETH = "ETH"
    BAT = "BAT"
    COMP = "COMP"
    DAI = "DAI"
    REP = "REP"
    SAI = "SAI"
    UNI = "UNI"
    USDC = "USDC"
    USDT = "USDT"
    WBTC = "WBTC"
    ZRX = "ZRX"
    BUSD = "BUSD"
    YFI = "YFI"
    AAVE = "AAVE"
    # 예치 후 받는 파생 토큰
    CETH = "cETH"
    CDAI = "cDAI"
    CUSDC = "cUSDC"
    YWETH = "yWETH"


class Handler(Enum):
    """Proxy, handler and directly-read protocol contracts"""
    PROXY = "proxy"
    FUNDS = "funds"
    UNISWAP = "uniswap"
    SUSHISWAP = "sushiswap"
    KYBER = "kyber"
    BALANCER_EXCHANGE = "balancer_exchange"
    CURVE = "curve"
    COMPOUND_ETHER = "compound_ether"
    COMPOUND_TOKEN = "compound_token"
    AAVE = "aave"
    YEARN = "yearn"
    MAKER = "maker"
    SWAPPER = "swapper"
    # 핸들러가 아니라 직접 조회하는 프로토콜 컨트랙트
    AAVE_LENDING_POOL = "aave_lending_pool"


def ilk(name: str) -> bytes:
    """Maker collateral type name (e.g. 'ETH-A') as a right-padded bytes32."""
    raw = name.encode('ascii')
    if len(raw) > 32:
        raise InvalidArgument(f"ilk name longer than 32 bytes: {name}")
    return raw.ljust(32, b'\x00')


def _freeze(mapping: Mapping, convert: Callable) -> Mapping:
    return MappingProxyType({k: convert(v) for k, v in dict(mapping).items()})


def _as_ilk(value) -> bytes:
    if isinstance(value, str):
        return ilk(value)
    if not isinstance(value, (bytes, bytearray)) or len(value) > 32:
        raise InvalidArgument(f"invalid ilk: {value!r}")
    return bytes(value).ljust(32, b'\x00')


@dataclass(frozen=True)
class AddressRegistry:
    network: str
    tokens: Mapping[Coin, str]
    handlers: Mapping[Handler, str]
    compound_markets: Mapping[Coin, str] = field(default_factory=dict)
    maker_joins: Mapping[Coin, str] = field(default_factory=dict)
    maker_ilks: Mapping[Coin, bytes] = field(default_factory=dict)
    yearn_vaults: Mapping[Coin, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, 'tokens', _freeze(self.tokens, to_checksum))
        object.__setattr__(self, 'handlers', _freeze(self.handlers, to_checksum))
        object.__setattr__(self, 'compound_markets', _freeze(self.compound_markets, to_checksum))
        object.__setattr__(self, 'maker_joins', _freeze(self.maker_joins, to_checksum))
        object.__setattr__(self, 'maker_ilks', _freeze(self.maker_ilks, _as_ilk))
        object.__setattr__(self, 'yearn_vaults', _freeze(self.yearn_vaults, to_checksum))

    @staticmethod
    def _lookup(mapping: Mapping, key, what: str):
        try:
            return mapping[key]
        except KeyError:
            raise InvalidArgument(f"no {what} configured for {getattr(key, 'value', key)}") from None

    def token(self, coin: Coin) -> str:
        """ERC-20 address for a coin; ETH resolves to WETH."""
        return self._lookup(self.tokens, coin, 'token address')

    def handler(self, handler: Handler) -> str:
        return self._lookup(self.handlers, handler, 'handler')

    def compound_market(self, coin: Coin) -> str:
        return self._lookup(self.compound_markets, coin, 'compound market')

    def maker_join(self, coin: Coin) -> str:
        return self._lookup(self.maker_joins, coin, 'maker join adapter')

    def maker_ilk(self, coin: Coin) -> bytes:
        return self._lookup(self.maker_ilks, coin, 'maker ilk')

    def yearn_vault(self, coin: Coin) -> str:
        return self._lookup(self.yearn_vaults, coin, 'yearn vault')

    @property
    def proxy(self) -> str:
        return self.handler(Handler.PROXY)

    def with_handlers(self, overrides: Dict[Handler, str]) -> 'AddressRegistry':
        """Copy of this registry with some handler addresses replaced."""
        handlers = dict(self.handlers)
        handlers.update(overrides)
        return replace(self, handlers=handlers)


MAINNET = AddressRegistry(
    network='mainnet',
    tokens={
        Coin.ETH: '0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2',  # WETH
        Coin.BAT: '0x0d8775f648430679a709e98d2b0cb6250d2887ef',
        Coin.COMP: '0xc00e94cb662c3520282e6f5717214004a7f26888',
        Coin.DAI: '0x6b175474e89094c44da98b954eedeac495271d0f',
        Coin.REP: '0x1985365e9f78359a9b6ad760e32412f4a445e862',
        Coin.SAI: '0x89d24a6b4ccb1b6faa2625fe562bdd9a23260359',
        Coin.UNI: '0x1f9840a85d5af5bf1d1762f925bdaddc4201f984',
        Coin.USDC: '0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48',
        Coin.USDT: '0xdac17f958d2ee523a2206206994597c13d831ec7',
        Coin.WBTC: '0x2260fac5e5542a773aa44fbcfedf7c193bc2c599',
        Coin.ZRX: '0xe41d2489571d322189246dafa5ebde1f4699f498',
        Coin.BUSD: '0x4fabb145d64652a948d72533023f6e7a623c7c53',
        Coin.YFI: '0x0bc529c00c6401aef6d220be8c6ea1667f6ad93e',
        Coin.AAVE: '0x7fc66500c84a76ad7e9c93437bfc5ac33e2ddae9',
        Coin.CETH: '0x4ddc2d193948926d02f9b1fe9e1daa0718270ed5',
        Coin.CDAI: '0x5d3a536e4d6dbd6114cc1ead35777bab948e3643',
        Coin.CUSDC: '0x39aa39c021dfbae8fac545936693ac917d5e7563',
        Coin.YWETH: '0xe1237aa7f535b0cc33fd973d66cbf830354d16c7',
    },
    handlers={
        Handler.PROXY: '0x57805e5a227937bac2b0fdacaa30413ddac6b8e1',
        Handler.FUNDS: '0xf9b03e9ea64b2311b0221b2854edd6df97669c09',
        Handler.UNISWAP: '0x58a21cfcee675d65d577b251668f7dc46ea9c3a0',
        Handler.SUSHISWAP: '0xb6f469a8930dd5111c0ea76571c7e86298a171f7',
        Handler.KYBER: '0xe2a3431508cd8e72d53a0e4b57c24af2899322a0',
        Handler.BALANCER_EXCHANGE: '0x892dd6ebd2e3e1c0d6592309ba82a0095830d6d6',
        Handler.CURVE: '0xa36dfb057010c419c5917f3d68b4520db3671cdb',
        Handler.COMPOUND_ETHER: '0x9a1049f7f87dbb0468c745d9b3952e23d5d6ce5e',
        Handler.COMPOUND_TOKEN: '0x8973d623d883c5641dd3906625aac31cdc8790c5',
        Handler.AAVE: '0xf579b009748a62b1978639d6b54259f8dc915229',
        Handler.YEARN: '0xc50c8f34c9955217a6b3e385a069184dce17fd2a',
        Handler.MAKER: '0x294fbca49c8a855e04d7d82b28256b086d39afea',
        Handler.SWAPPER: '0x017f3f2eb0c55ddf49b95ad38cd2737acf64ab4d',
        Handler.AAVE_LENDING_POOL: '0x398ec7346dcd622edc5ae82352f02be94c62d119',
    },
    compound_markets={
        Coin.ETH: '0x4ddc2d193948926d02f9b1fe9e1daa0718270ed5',
        Coin.DAI: '0x5d3a536e4d6dbd6114cc1ead35777bab948e3643',
        Coin.USDC: '0x39aa39c021dfbae8fac545936693ac917d5e7563',
    },
    # Join 은 MakerDao 용어로 담보 입출금 어댑터를 뜻한다
    maker_joins={
        Coin.DAI: '0x9759a6ac90977b93b58547b4a71c78317f391a28',
        Coin.ETH: '0x2f0b23f53734252bda2277357e97e1517d6b042a',
        Coin.USDC: '0x2600004fd1585f7270756ddc88ad9cfa10dd0428',
        Coin.YFI: '0x3ff33d9162ad47660083d7dc4bc02fb231c81677',
        Coin.USDT: '0x0ac6a1d74e84c2df9063bddc31699ff2a2bb22a2',
        Coin.UNI: '0x2502f65d77ca13f183850b5f9272270454094a08',
        Coin.AAVE: '0x24e459f61ceaa7b1ce70dbaea938940a7c5ad46e',
    },
    # Ilk 은 MakerDao 담보 유형
    maker_ilks={
        Coin.ETH: 'ETH-A',
        Coin.YFI: 'YFI-A',
        Coin.USDC: 'USDC-B',
        Coin.USDT: 'USDT-A',
        Coin.UNI: 'UNIV2DAIETH-A',
        Coin.AAVE: 'AAVE-A',
    },
    yearn_vaults={
        Coin.ETH: '0xe1237aa7f535b0cc33fd973d66cbf830354d16c7',
        Coin.DAI: '0xacd43e627e64355f1861cec6d3a6688b31a6f952',
        Coin.USDC: '0x597ad1e0c13bfe8025993d9e79c69e1c0233522e',
        Coin.USDT: '0x2f08119c6f07c006695e079aafc638b8789faf18',
        Coin.YFI: '0xba2e7fed597fd0e3e70f5130bcdbbfe06bb94fe1',
    },
)

# 로컬 메인넷 포크 (ganache / anvil): 같은 주소, 다른 RPC
MAINNET_FORK = replace(MAINNET, network='mainnet-fork')

_REGISTRIES: Dict[str, AddressRegistry] = {
    'mainnet': MAINNET,
    'mainnet-fork': MAINNET_FORK,
}

SUPPORTED_NETWORKS = tuple(_REGISTRIES)


def registry_for_network(network: str, proxy_override: Optional[str] = None) -> AddressRegistry:
    """Registry for a named network, optionally pointing at a different proxy."""
    try:
        registry = _REGISTRIES[network.lower()]
    except KeyError:
        raise InvalidArgument(f"no address registry for network: {network}") from None
    if proxy_override:
        registry = registry.with_handlers({Handler.PROXY: proxy_override})
    return registry
