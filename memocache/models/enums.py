from enum import StrEnum


class EvictionStrategy(StrEnum):
    LRU = "LRU"
    FIFO = "FIFO"
    LFU = "LFU"
