"""
命名服務：生成與正規化 Room Code

純計算邏輯，不涉及狀態轉換
"""
import random

# 32 個字元：去掉容易混淆的 I、O、0、1
ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ROOM_CODE_LENGTH = 4


def generate_room_code() -> str:
    """
    生成隨機的 4 碼房間代碼

    範例：AB2C, X9KM

    注意：
    - 不檢查唯一性（由呼叫者負責）
    - 32^4 = 1,048,576 種可能，單次碰撞機率低，但房間數量沒有上限，
      呼叫者必須重試直到不碰撞
    """
    return ''.join(random.choices(ROOM_CODE_ALPHABET, k=ROOM_CODE_LENGTH))


def normalize_room_code(code: str) -> str:
    """
    正規化使用者輸入的房間代碼（去除前後空白、轉大寫）

    範例：
        normalize_room_code(" ab2c ") -> "AB2C"
    """
    return code.strip().upper()


def is_valid_room_code(code: str) -> bool:
    """檢查已正規化的代碼是否符合格式（長度與字元集）"""
    return len(code) == ROOM_CODE_LENGTH and all(c in ROOM_CODE_ALPHABET for c in code)
