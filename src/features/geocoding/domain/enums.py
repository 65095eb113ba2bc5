"""ジオコーディング機能のEnum定義"""
from enum import Enum
from types import MappingProxyType
from typing import Optional


class AmapStatus(str, Enum):
    """高德APIのレスポンスステータス"""

    SUCCESS = "1"  # 成功
    FAILURE = "0"  # 失敗


class Municipality(str, Enum):
    """直轄市（省級の行政名）"""

    BEIJING = "北京市"
    SHANGHAI = "上海市"
    TIANJIN = "天津市"
    CHONGQING = "重庆市"


# 直轄市の表示用短縮名（省名 -> 都市名）
MUNICIPALITY_SHORT_NAMES = MappingProxyType(
    {
        Municipality.BEIJING.value: "北京",
        Municipality.SHANGHAI.value: "上海",
        Municipality.TIANJIN.value: "天津",
        Municipality.CHONGQING.value: "重庆",
    }
)


def is_municipality(province: Optional[str]) -> bool:
    """省名が直轄市かどうか"""
    return bool(province) and province in MUNICIPALITY_SHORT_NAMES
