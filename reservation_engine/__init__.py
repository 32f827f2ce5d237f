"""
Движок бронирования ресурсов с ограниченной вместимостью.

Доменная модель (интервалы, бронирования, ресурсы, история),
прикладные сервисы жизненного цикла бронирования и инфраструктура в памяти.
"""

__version__ = "0.1.0"
