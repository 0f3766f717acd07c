import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

# 주소 registry 가 있는 네트워크
SUPPORTED_NETWORKS = ('mainnet', 'mainnet-fork')

@dataclass
class Config:
    # RPC 설정
    ethereum_mainnet_rpc: str = os.getenv('ETHEREUM_MAINNET_RPC', '')
    # 로컬 메인넷 포크 노드 (ganache / anvil)
    fork_rpc: str = os.getenv('FORK_RPC', 'http://127.0.0.1:8545')
    network: str = os.getenv('NETWORK', 'mainnet')

    # 거래 설정
    private_key: str = os.getenv('PRIVATE_KEY', '')
    # Proxy 주소 override (빈 값이면 registry 기본값 사용)
    proxy_address: str = os.getenv('PROXY_ADDRESS', '')
    batch_gas_limit: int = int(os.getenv('BATCH_GAS_LIMIT', '5000000'))
    # 빈 블록을 만났을 때 뒤로 탐색할 최대 블록 수
    gas_lookback_blocks: int = int(os.getenv('GAS_LOOKBACK_BLOCKS', '64'))
    receipt_timeout_sec: int = int(os.getenv('RECEIPT_TIMEOUT_SEC', '120'))
    # 'clamp' | 'strict'
    approval_policy: str = os.getenv('APPROVAL_POLICY', 'clamp')

    # 모니터링
    log_level: str = os.getenv('LOG_LEVEL', 'INFO')
    log_dir: str = os.getenv('LOG_DIR', 'logs')

    def rpc_url(self) -> str:
        """네트워크에 맞는 RPC 엔드포인트"""
        if self.network.lower() == 'mainnet-fork':
            return self.fork_rpc
        return self.ethereum_mainnet_rpc

    @property
    def strict_approvals(self) -> bool:
        return self.approval_policy.lower() == 'strict'

    def validate(self) -> bool:
        """설정 유효성 검사"""
        required_fields = [
            self.rpc_url(),
            self.private_key
        ]
        return all(field for field in required_fields) and self.network.lower() in SUPPORTED_NETWORKS

# 전역 설정 인스턴스
config = Config()
