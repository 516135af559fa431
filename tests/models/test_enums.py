from memocache.models.enums import EvictionStrategy


class TestEvictionStrategy:
    def test_values(self):
        assert [s.value for s in EvictionStrategy] == ["LRU", "FIFO", "LFU"]

    def test_str_comparison(self):
        assert EvictionStrategy.LRU == "LRU"
