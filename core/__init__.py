"""
核心業務邏輯層

這個 package 包含所有核心業務邏輯，包括：
- RoomRegistry：管理 Room 的建立、查詢與刪除
- RoomSession：房間狀態機（加入、投票、翻牌、清除、離開）
- ConnectionManager：WebSocket 連線與對外廣播
- Locks：並發控制工具
"""
