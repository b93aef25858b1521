"""Клиент списка задач с оптимистичной синхронизацией через REST API."""

__version__ = "0.1.0"
