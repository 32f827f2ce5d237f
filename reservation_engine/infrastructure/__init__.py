"""
Инфраструктурный слой: хранилище в памяти, шины событий, единица работы, логирование.
"""
