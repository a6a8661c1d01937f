"""
Static code tables shared by the domain and the presentation layer.

Ids start at 1; 0 is never a valid code.
"""

from typing import Dict, FrozenSet

# Booking states
BOOK_STATE_PENDING = 1
BOOK_STATE_IN_PROGRESS = 2
BOOK_STATE_COMPLETE = 3
BOOK_STATE_CANCELED = 4

BOOK_STATES: Dict[int, str] = {
    BOOK_STATE_PENDING: "예약 대기",
    BOOK_STATE_IN_PROGRESS: "세탁 중",
    BOOK_STATE_COMPLETE: "세탁 완료",
    BOOK_STATE_CANCELED: "예약 취소",
}

TERMINAL_BOOK_STATES: FrozenSet[int] = frozenset(
    {BOOK_STATE_COMPLETE, BOOK_STATE_CANCELED}
)

# Allowed target states for each source state
BOOK_STATE_TRANSITIONS: Dict[int, FrozenSet[int]] = {
    BOOK_STATE_PENDING: frozenset({BOOK_STATE_IN_PROGRESS, BOOK_STATE_CANCELED}),
    BOOK_STATE_IN_PROGRESS: frozenset({BOOK_STATE_COMPLETE, BOOK_STATE_CANCELED}),
    BOOK_STATE_COMPLETE: frozenset(),
    BOOK_STATE_CANCELED: frozenset(),
}

# Booking payment methods
BOOK_METHOD_ON_SITE = 1
BOOK_METHOD_METAPAY = 2

BOOK_METHODS: Dict[int, str] = {
    BOOK_METHOD_ON_SITE: "현장 결제",
    BOOK_METHOD_METAPAY: "메타페이",
}

CLOTHES: Dict[int, str] = {
    1: "상의/자켓",
    2: "하의",
    3: "스커트",
    4: "와이셔츠/남방",
    5: "티셔츠",
    6: "블라우스",
    7: "원피스",
    8: "스웨터/가디건",
    9: "봄가을점퍼/아웃도어",
    10: "코트",
    11: "가죽/모피의류",
    12: "겨울패딩/점퍼",
    13: "넥타이",
    14: "스카프/목도리",
    15: "이불/침구류",
    16: "커튼/카페트",
    17: "한복류",
    18: "모자",
    19: "가방/기타가죽제품",
    20: "운동화/스니커즈류",
}

FABRICS: Dict[int, str] = {
    1: "면",
    2: "니트",
    3: "레이온",
    4: "데님",
    5: "실크/쉬폰",
    6: "린넨",
    7: "퍼",
    8: "앙고라",
    9: "가죽",
}

BANKS: Dict[int, str] = {
    1: "농협",
    2: "국민",
    3: "우리",
    4: "하나",
}

# User types
USER_TYPE_CUSTOMER = "customer"
USER_TYPE_OWNER = "owner"
USER_TYPE_ADMIN = "admin"

USER_TYPES: FrozenSet[str] = frozenset(
    {USER_TYPE_CUSTOMER, USER_TYPE_OWNER, USER_TYPE_ADMIN}
)

# Pay log types
PAY_LOG_CHARGE = "charge"
PAY_LOG_PAYMENT = "payment"
PAY_LOG_REFUND = "refund"

PAY_LOG_TYPES: Dict[str, str] = {
    PAY_LOG_CHARGE: "충전",
    PAY_LOG_PAYMENT: "결제",
    PAY_LOG_REFUND: "환불",
}


def can_transition(current_state: int, target_state: int) -> bool:
    """Return True when a booking may move from current_state to target_state."""
    return target_state in BOOK_STATE_TRANSITIONS.get(current_state, frozenset())
