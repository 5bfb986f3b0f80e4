"""例外定義"""


class InvalidArgument(ValueError):
    """呼び出し側の入力誤り（半径<=0、空の座標列、範囲外の座標など）"""
