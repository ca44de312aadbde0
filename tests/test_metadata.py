import random
import struct

import pytest

from valik.metadata import Metadata


def _dna(length, seed):
    rng = random.Random(seed)
    return "".join(rng.choice("ACGT") for _ in range(length))


def _fasta(path, records):
    path.write_text("".join(f">{name}\n{seq}\n" for name, seq in records))
    return path


def _check_coverage(meta, ind, length, overlap):
    segments = meta.segments_from_ind(ind)
    assert segments[0].start == 0
    assert segments[-1].start + segments[-1].length == length
    for a, b in zip(segments, segments[1:]):
        assert a.start + a.length - b.start >= overlap


def test_reference_split_into_exact_segment_count(tmp_path):
    ref = _fasta(tmp_path / "ref.fasta", [("chr1 some description", _dna(1000, 1))])
    meta = Metadata.from_reference([ref], seg_count=4, pattern_size=50, fpr=0.001)
    assert meta.seg_count == 4
    assert meta.seq_count == 1
    assert meta.sequences[0].id == "chr1"
    assert [seg.id for seg in meta.segments] == list(range(4))
    assert meta.pattern_size == 50
    _check_coverage(meta, 0, 1000, 50)


def test_short_sequence_is_skipped(tmp_path, capsys):
    ref = _fasta(tmp_path / "ref.fasta", [("short", _dna(10, 2)), ("long", _dna(1000, 3))])
    meta = Metadata.from_reference([ref], seg_count=4, pattern_size=50, fpr=0.001)
    assert "Sequence: short is too short and will be skipped." in capsys.readouterr().err
    assert meta.total_len == 1000
    assert meta.seq_count == 2
    assert meta.segments_from_ind(0) == []
    assert len(meta.segments_from_ind(1)) == 4
    assert [seq.ind for seq in meta.sequences] == [0, 1]


def test_too_many_sequences_for_segment_count(tmp_path):
    ref = _fasta(tmp_path / "ref.fasta", [(f"s{i}", _dna(1000, i)) for i in range(3)])
    with pytest.raises(ValueError, match="Can not split 3 sequences into 2 segments"):
        Metadata.from_reference([ref], seg_count=2, pattern_size=50, fpr=0.001)


def test_overlap_longer_than_segment(tmp_path):
    ref = _fasta(tmp_path / "ref.fasta", [("chr1", _dna(1000, 1))])
    with pytest.raises(ValueError, match="can not overlap by 500bp"):
        Metadata.from_reference([ref], seg_count=4, pattern_size=500, fpr=0.001)


def test_no_reference_files():
    with pytest.raises(ValueError):
        Metadata.from_reference([], seg_count=4, pattern_size=50, fpr=0.001)


def test_metagenome_one_segment_per_bin(tmp_path):
    bin0 = _fasta(tmp_path / "bin_0.fasta", [("a", _dna(30, 1)), ("b", _dna(40, 2))])
    bin1 = _fasta(tmp_path / "bin_1.fasta", [("c", _dna(50, 3)), ("d", _dna(60, 4))])
    meta = Metadata.from_reference([bin0, bin1], seg_count=2, pattern_size=20, fpr=0.01, metagenome=True)
    assert [(f.id, f.path) for f in meta.files] == [(0, str(bin0)), (1, str(bin1))]
    assert [seq.file_id for seq in meta.sequences] == [0, 0, 1, 1]
    assert [seg.seq_vec for seg in meta.segments] == [[0, 1], [2, 3]]
    assert [seg.length for seg in meta.segments] == [30 + 40, 50 + 60]
    assert meta.total_len == 30 + 40 + 50 + 60
    assert meta.segments_from_ind(3) == [meta.segments[1]]


def test_lookups(tmp_path):
    ref = _fasta(tmp_path / "ref.fasta", [("x", _dna(500, 1)), ("y", _dna(500, 2))])
    meta = Metadata.from_reference([ref], seg_count=4, pattern_size=50, fpr=0.001)
    assert meta.ind_from_id("y") == 1
    assert meta.segment_from_bin(0) == meta.segments[0]
    with pytest.raises(ValueError, match="does not contain sequence z"):
        meta.ind_from_id("z")
    with pytest.raises(IndexError, match="Segment 4 index out of range"):
        meta.segment_from_bin(4)
    with pytest.raises(IndexError, match="Sequence 2 index out of range"):
        meta.segments_from_ind(2)


def test_query_split_covers_sequences(tmp_path):
    query = _fasta(tmp_path / "query.fasta", [("q1", _dna(300, 1)), ("q2", _dna(300, 2))])
    meta = Metadata.from_query(query, pattern_size=50, max_segment_len=1000)
    assert meta.seg_count >= meta.seq_count
    assert [seg.id for seg in meta.segments] == list(range(meta.seg_count))
    _check_coverage(meta, 0, 300, 50)
    _check_coverage(meta, 1, 300, 50)


def test_query_split_by_max_segment_length(tmp_path):
    query = _fasta(tmp_path / "query.fasta", [("q1", _dna(600, 1)), ("q2", _dna(600, 2))])
    meta = Metadata.from_query(query, pattern_size=20, max_segment_len=100)
    assert meta.seg_count > 2 * meta.seq_count
    assert all(seg.length <= 200 for seg in meta.segments)
    _check_coverage(meta, 1, 600, 20)


def test_query_manual_segment_count_warning(tmp_path, capsys):
    query = _fasta(tmp_path / "query.fasta", [("q1", _dna(300, 1)), ("q2", _dna(300, 2))])
    meta = Metadata.from_query(query, pattern_size=50, seg_count_in=3, manual_parameters=True)
    assert meta.seg_count != 3
    assert "[Warning] Database was split into" in capsys.readouterr().err


def test_query_needs_segment_count_or_length(tmp_path):
    query = _fasta(tmp_path / "query.fasta", [("q1", _dna(300, 1))])
    with pytest.raises(ValueError):
        Metadata.from_query(query, pattern_size=50)


def test_update_segments_for_distributed_stellar(tmp_path):
    ref = _fasta(tmp_path / "ref.fasta", [("chr1", _dna(1000, 1))])
    meta = Metadata.from_reference([ref], seg_count=4, pattern_size=50, fpr=0.001)
    meta.update_segments_for_distributed_stellar(seg_count=2, pattern_size=50)
    assert meta.seg_count == len(meta.segments)
    assert meta.seg_count < 4
    assert [seg.id for seg in meta.segments] == list(range(meta.seg_count))
    _check_coverage(meta, 0, 1000, 50)


def test_save_load_round_trip(tmp_path):
    ref = _fasta(tmp_path / "ref.fasta", [("x", _dna(500, 1)), ("y", _dna(700, 2))])
    meta = Metadata.from_reference([ref], seg_count=4, pattern_size=50, fpr=0.001)
    out = tmp_path / "ref.bin"
    meta.save(out)
    loaded = Metadata.load(out)
    assert loaded == meta
    assert str(loaded) == str(meta)
    assert loaded.seg_count == meta.seg_count
    assert struct.unpack_from("<QQ", out.read_bytes()) == (meta.total_len, 50)


def test_load_truncated_file(tmp_path):
    ref = _fasta(tmp_path / "ref.fasta", [("x", _dna(500, 1))])
    meta = Metadata.from_reference([ref], seg_count=2, pattern_size=50, fpr=0.001)
    out = tmp_path / "ref.bin"
    meta.save(out)
    out.write_bytes(out.read_bytes()[:-3])
    with pytest.raises(ValueError, match="Truncated"):
        Metadata.load(out)


def test_to_string_layout(tmp_path):
    bin0 = _fasta(tmp_path / "bin_0.fasta", [("a", "ACGT")])
    bin1 = _fasta(tmp_path / "bin_1.fasta", [("b", "ACGTAC")])
    meta = Metadata.from_reference([bin0, bin1], seg_count=2, pattern_size=2, fpr=0.01, metagenome=True)
    lines = str(meta).splitlines()
    assert lines == ["a\t0\t4", "b\t1\t6", "$", "0\t0\t0\t4", "1\t1\t0\t6", "$"]


def test_segment_length_statistics(tmp_path):
    bin0 = _fasta(tmp_path / "bin_0.fasta", [("a", "AC")])
    bin1 = _fasta(tmp_path / "bin_1.fasta", [("b", "ACGT")])
    meta = Metadata.from_reference([bin0, bin1], seg_count=2, pattern_size=1, fpr=0.01, metagenome=True)
    assert meta.segment_length_stdev() == pytest.approx(1.0)
    assert meta.segment_length_cv() == pytest.approx(1 / 3)


def test_equal_segment_lengths_have_no_spread(tmp_path):
    bin0 = _fasta(tmp_path / "bin_0.fasta", [("a", "ACGT")])
    bin1 = _fasta(tmp_path / "bin_1.fasta", [("b", "TTTT")])
    meta = Metadata.from_reference([bin0, bin1], seg_count=2, pattern_size=1, fpr=0.01, metagenome=True)
    assert meta.segment_length_stdev() == 0.0
    assert meta.segment_length_cv() == 0.0