from abx_core.collector import GapAwareCollector
from abx_core.exporter import export_ordered
from tests._channels import StreamChannel, frames, rec


def test_export_is_ascending_and_unique():
    c = GapAwareCollector()
    c.drain_all(StreamChannel(frames(5, 3, 1, 3, 4, 2)))
    out = export_ordered(c)
    seqs = [r.sequence_number for r in out]
    assert seqs == [1, 2, 3, 4, 5]
    assert len(set(seqs)) == len(seqs)


def test_export_accepts_store_and_does_not_mutate():
    c = GapAwareCollector()
    c.add(rec(2))
    c.add(rec(1))
    before = c.store.sequences()
    out = export_ordered(c.store)
    out.clear()
    assert c.store.sequences() == before == [1, 2]


def test_export_empty():
    assert export_ordered(GapAwareCollector()) == []
