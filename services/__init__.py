"""
服務層

這個 package 包含純計算邏輯，不負責狀態轉換：
- NamingService：房間代碼生成與正規化
- ViewService：房間快照（票面遮蔽、平均計算）
"""
