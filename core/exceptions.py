"""
自定義異常類別

集中管理所有業務邏輯異常，方便 API 層統一處理
"""


class ScrumPokerException(Exception):
    """所有估點房間異常的基類"""
    pass


# ============ Room 相關異常 ============

class RoomNotFound(ScrumPokerException):
    """房間不存在（或已因最後一人離開而刪除）"""
    def __init__(self, code):
        self.code = code
        super().__init__(f"Room {code} not found")


# ============ Participant 相關異常 ============

class ParticipantNotFound(ScrumPokerException):
    """連線不在房間內"""
    def __init__(self, connection_id):
        self.connection_id = connection_id
        super().__init__(f"Participant {connection_id} not found")


# ============ 權限異常（靜默忽略） ============

class Unauthorized(ScrumPokerException):
    """
    不被允許的動作

    客戶端 UI 應該已經阻擋這些動作，所以 RoomSession 會直接忽略，
    不會回傳錯誤給客戶端
    """
    pass


class NotFacilitator(Unauthorized):
    """非主持人嘗試翻牌或清除"""
    pass


class VotingClosed(Unauthorized):
    """已翻牌後仍嘗試投票"""
    pass
