import pytest

from valik.seqio import FastaRecord, read_fasta, write_fasta


def test_round_trip(tmp_path):
    path = tmp_path / "out.fasta"
    records = [FastaRecord("seq1 first", "ACGT" * 50), FastaRecord("seq2", "GATTACA")]
    write_fasta(path, records)
    assert list(read_fasta(path)) == records


def test_lines_are_wrapped_at_80(tmp_path):
    path = tmp_path / "wrapped.fasta"
    write_fasta(path, [FastaRecord("x", "A" * 100)])
    lines = path.read_text().splitlines()
    assert lines[0] == ">x"
    assert [len(line) for line in lines[1:]] == [80, 20]


def test_multi_line_fasta_is_joined(tmp_path):
    path = tmp_path / "in.fasta"
    path.write_text(">a desc\nACG\nTTA\n\n>b\nGG\n")
    records = list(read_fasta(path))
    assert records == [FastaRecord("a desc", "ACGTTA"), FastaRecord("b", "GG")]


def test_fastq_is_read(tmp_path):
    path = tmp_path / "in.fq"
    path.write_text("@r1\nACGT\n+\nIIII\n@r2\nGGA\n+r2\nIII\n")
    records = list(read_fasta(path))
    assert records == [FastaRecord("r1", "ACGT"), FastaRecord("r2", "GGA")]


def test_empty_file_has_no_records(tmp_path):
    path = tmp_path / "empty.fasta"
    path.write_text("")
    assert list(read_fasta(path)) == []


def test_missing_header_raises(tmp_path):
    path = tmp_path / "bad.fasta"
    path.write_text("ACGT\n")
    with pytest.raises(ValueError):
        list(read_fasta(path))


def test_fastq_quality_length_mismatch_raises(tmp_path):
    path = tmp_path / "bad.fq"
    path.write_text("@r1\nACGT\n+\nII\n")
    with pytest.raises(ValueError):
        list(read_fasta(path))