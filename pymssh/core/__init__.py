"""认证解析、会话与并行分发"""
