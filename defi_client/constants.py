"""공통 상수 정의"""

# 네이티브 ETH를 표현하기 위한 플레이스홀더 주소 (관용)
ETH_NATIVE_ADDRESS = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"

# 배치 트랜잭션 기본 가스 한도
DEFAULT_BATCH_GAS_LIMIT = 5_000_000

# 가스 가격 추정 시 빈 블록을 건너뛰는 최대 횟수
DEFAULT_GAS_LOOKBACK_BLOCKS = 64

# Uniswap 핸들러 스왑에서 최소 출력량 (슬리피지 검증은 하지 않음)
MIN_AMOUNT_OUT = 0

# Kyber 최소 환율
MIN_CONVERSION_RATE = 0

# Balancer smartSwapExactIn 에서 탐색할 풀 수
BALANCER_MAX_POOLS = 10

# Proxy / handler 함수 시그니처
BATCH_EXEC_SIGNATURE = "batchExec(address[],bytes[])"
EXECS_SIGNATURE = "execs(address[],bytes[])"
INJECT_SIGNATURE = "inject(address[],uint256[])"

# 단독 ERC-20 approve 트랜잭션 가스 한도
APPROVE_GAS_LIMIT = 500_000
APPROVE_SIGNATURE = "approve(address,uint256)"
