"""
TaskHub — совместный менеджер задач с умными уведомлениями о дедлайнах.
"""
