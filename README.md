# valik

`valik` is a library for preparing and prefiltering local alignment searches
on nucleotide sequences. It splits reference and query databases into
overlapping segments and computes minimiser thresholds. It also decides which
reference bins a query pattern is likely to match, so that the expensive
alignment step only runs where it can succeed.

The package has no runtime dependencies beyond the Python standard library.
It requires Python 3.10 or later.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
pytest
```

## What is inside

- `valik.seqio`: a small sequence file reader and writer. `read_fasta` yields
  `FastaRecord(id, sequence)` objects from FASTA or FASTQ files.
  `write_fasta` writes FASTA with 80 letters per line.
- `valik.segmentation`: `SequenceFile`, `SequenceStats` and `SegmentStats`
  records. `trim_fasta_id` keeps the first word of a header. The functions
  `make_exactly_n_segments`, `make_equal_length_segments` and
  `split_sequences` split sequences into segments that overlap by the pattern
  size. Sequences shorter than a tenth of the default segment length are
  skipped with a warning on standard error.
- `valik.metadata`: the `Metadata` class.
  - `Metadata.from_reference` scans a reference database. A metagenome gets
    one segment per bin file. A single file is split into exactly
    `seg_count` segments.
  - `Metadata.from_query` scans a query file and splits it into segments of
    roughly equal length.
  - `save` and `load` write and read a little-endian binary file.
  - `segment_from_bin`, `segments_from_ind` and `ind_from_id` look up
    segments and sequences.
  - `segment_length_stdev` and `segment_length_cv` describe how the segment
    lengths vary.
  - `str(meta)` gives a tab-separated listing of the sequences and segments.
- `valik.write_segments`: writes the sequence of each segment back out.
  - `write_reference_segments` writes one FASTA file per reference segment,
    named `<stem>_<id><suffix>`, and lists those files in `seg_files.txt`.
  - `write_query_segments` writes all query segments into
    `<query>.segments.fasta`.
- `valik.error_models`: log-space models of how errors destroy minimisers.
  These are `pascal_row`, `one_error_model` and `multiple_error_model`.
- `valik.precompute`: `ThresholdParameters`, `precompute_correction` and
  `precompute_threshold`. Results can be cached in
  `output_directory` when `cache_thresholds` is set. The cache file names come
  from `correction_filename` and `threshold_filename`.
- `valik.threshold`: `Threshold` and `ThresholdKind`. For a given minimiser
  count, `Threshold.get` returns how many minimisers must be shared. The value
  comes from the k-mer lemma, a fixed percentage, or the precomputed
  probabilistic tables.
- `valik.prefilter`: the pattern-level steps of prefiltering.
  - `pattern_begin_positions` splits a query into patterns.
  - `make_pattern_bounds` maps a pattern to its range of minimisers and
    returns a `PatternBounds`.
  - `find_pattern_bins` collects the bins whose counts reach the threshold.
- `valik.spurious`: `segment_fpr` estimates the false positive rate of a query
  segment. `max_segment_len` gives the longest segment length to use.
- `valik.cart_queue`: the thread-safe `CartQueue`. Producers drop values into
  per-bin carts, and full carts are handed to consumers in batches. Used as a
  context manager, it calls `finish` on exit.
- `valik.fraction`: an exact `Fraction` type for error rates, with a lower
  precision bound. It can be built with `from_string`, `from_double`,
  `from_double_with_limit` and `from_precision_limit`.
- `valik.options`: option dataclasses (`DreamOptions`, `EpsMatchOptions`,
  `IndexOptions`, `VerifierOptions`) and the `VerificationMethod` enum.
- `valik.segments`: `SequenceSegment` and `DatabaseSegment` over in-memory
  sequences. The module also has `reverse_complement`,
  `get_database_segments` and `get_dream_database_segment`.
- `valik.runtime`: nested runtime counters (`Runtime`, `AppRuntime` and
  friends). `print_app_time` and `print_strand_time` print a breakdown.
- `valik.environment`: `EnvVarPack.from_environment` reads the `VALIK_TMP`,
  `VALIK_STELLAR` and `VALIK_MERGE` environment variables.
  `create_temporary_path` makes a fresh temporary directory.
- `valik.external_process`: `run_external` runs a program and returns a
  `ProcessResult`. `find_executable` looks a program up in `PATH`.
  `check_success` reports a failed call.

## Examples

```python
from valik.metadata import Metadata

meta = Metadata.from_reference(
    ["ref.fasta"], seg_count=16, pattern_size=50, fpr=0.001, metagenome=False
)
for segment in meta.segments_from_ind(0):
    print(segment.unique_id(), segment.start, segment.length)

meta.save("ref.bin")
again = Metadata.load("ref.bin")
print(again)
```

```python
from valik.prefilter import pattern_begin_positions

print(list(pattern_begin_positions(150, 50, 30)))  # [0, 30, 60, 90, 100]
```

```python
from valik.precompute import ThresholdParameters
from valik.threshold import Threshold

# The window equals the k-mer, so the k-mer lemma applies: 51 - 2 * 19 = 13.
params = ThresholdParameters(window_size=19, shape="1" * 19, query_length=50, errors=1)
print(Threshold(params).get(32))  # 13
```

## What the package does not do

- There is no command-line program. Everything is used from Python.
- There is no Bloom filter index, so there is no index building or index
  loading. Nothing computes minimiser hashes from sequences. `find_pattern_bins`
  expects a ready-made counting table with one row per minimiser and one
  column per bin.
- Probabilistic thresholds need the log probabilities that one error
  indirectly affects 0 to w minimisers. The caller must pass these to
  `Threshold` or `precompute_threshold` as `indirect_error_prob`. The package
  does not estimate them.
- It does not run the alignment search itself or merge its results.
  `valik.environment` and `valik.external_process` only provide the settings
  and the means to start such tools.