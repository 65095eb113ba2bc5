"""
座標系変換ユーティリティ

WGS-84（GPSの測地系）から GCJ-02（高德地図などの中国の地図サービスが
入力として要求する測地系）への変換を行う。

逆方向（GCJ-02 → WGS-84）は提供しない。
"""

import math

# クラソフスキー楕円体
A = 6378245.0  # 長半径
EE = 0.00669342162296594323  # 離心率の2乗

# 補正を適用する範囲（中国本土をおおよそ囲む矩形）
MIN_LNG = 72.004
MAX_LNG = 137.8347
MIN_LAT = 0.8293
MAX_LAT = 55.8271


def out_of_china(lng: float, lat: float) -> bool:
    """座標が補正範囲の外にあるか（境界上は範囲内とみなす）"""
    return not (MIN_LNG <= lng <= MAX_LNG and MIN_LAT <= lat <= MAX_LAT)


def transform_lat(x: float, y: float) -> float:
    """緯度方向の補正量（x = 経度 - 105, y = 緯度 - 35）"""
    ret = -100.0 + 2.0 * x + 3.0 * y + 0.2 * y * y + 0.1 * x * y + 0.2 * math.sqrt(abs(x))
    ret += (20.0 * math.sin(6.0 * x * math.pi) + 20.0 * math.sin(2.0 * x * math.pi)) * 2.0 / 3.0
    ret += (20.0 * math.sin(y * math.pi) + 40.0 * math.sin(y / 3.0 * math.pi)) * 2.0 / 3.0
    ret += (160.0 * math.sin(y / 12.0 * math.pi) + 320.0 * math.sin(y * math.pi / 30.0)) * 2.0 / 3.0
    return ret


def transform_lng(x: float, y: float) -> float:
    """経度方向の補正量（x = 経度 - 105, y = 緯度 - 35）"""
    ret = 300.0 + x + 2.0 * y + 0.1 * x * x + 0.1 * x * y + 0.1 * math.sqrt(abs(x))
    ret += (20.0 * math.sin(6.0 * x * math.pi) + 20.0 * math.sin(2.0 * x * math.pi)) * 2.0 / 3.0
    ret += (20.0 * math.sin(x * math.pi) + 40.0 * math.sin(x / 3.0 * math.pi)) * 2.0 / 3.0
    ret += (150.0 * math.sin(x / 12.0 * math.pi) + 300.0 * math.sin(x / 30.0 * math.pi)) * 2.0 / 3.0
    return ret


def wgs84_to_gcj02(lat: float, lng: float) -> tuple[float, float]:
    """
    WGS-84 座標を GCJ-02 座標に変換

    補正範囲外の座標は入力をそのまま返す。

    Args:
        lat: WGS-84 緯度
        lng: WGS-84 経度

    Returns:
        tuple[float, float]: (GCJ-02 緯度, GCJ-02 経度)
    """
    if out_of_china(lng, lat):
        return lat, lng

    d_lat = transform_lat(lng - 105.0, lat - 35.0)
    d_lng = transform_lng(lng - 105.0, lat - 35.0)

    # メートル単位の補正量を、その緯度における曲率半径で度に換算
    rad_lat = lat / 180.0 * math.pi
    magic = math.sin(rad_lat)
    magic = 1 - EE * magic * magic
    sqrt_magic = math.sqrt(magic)
    d_lat = (d_lat * 180.0) / ((A * (1 - EE)) / (magic * sqrt_magic) * math.pi)
    d_lng = (d_lng * 180.0) / (A / sqrt_magic * math.cos(rad_lat) * math.pi)

    return lat + d_lat, lng + d_lng


def format_location(lat: float, lng: float) -> str:
    """
    高德APIの location パラメータ形式に整形

    Returns:
        str: "経度,緯度"（小数点以下6桁）
    """
    return f"{lng:.6f},{lat:.6f}"
