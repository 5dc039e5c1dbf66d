#!/usr/bin/env python3
"""
FASTA utilities for the orthocds pipeline
Reading is delegated to Biopython; writing wraps sequence lines at a fixed width.
"""
import logging
from typing import Dict, Iterable, Iterator, List, Tuple

from Bio.SeqIO.FastaIO import SimpleFastaParser

from orthocds.core.file_utils import atomic_write
from orthocds.exceptions import FileOperationError, ValidationError

logger = logging.getLogger("orthocds.utils.fasta")

LINE_WIDTH = 80


def iter_fasta(file_path: str) -> Iterator[Tuple[str, str]]:
    """Yield (title, sequence) pairs from a FASTA file

    The title is the full header line without '>'; all whitespace is removed
    from the sequence.

    Raises:
        FileOperationError: If the file cannot be read
        ValidationError: If the content is not FASTA
    """
    try:
        with open(file_path, 'r') as handle:
            for title, sequence in SimpleFastaParser(handle):
                yield title.strip(), ''.join(sequence.split())
    except OSError as e:
        error_msg = f"Error reading FASTA file {file_path}: {str(e)}"
        logger.error(error_msg)
        raise FileOperationError(error_msg, {"file_path": file_path}) from e
    except ValueError as e:
        raise ValidationError(f"Malformed FASTA file {file_path}: {str(e)}",
                              {"file_path": file_path}) from e


def read_fasta_entries(file_path: str) -> List[Tuple[str, str]]:
    """Read every (title, sequence) pair, duplicates included"""
    return list(iter_fasta(file_path))


def read_fasta(file_path: str) -> Dict[str, str]:
    """Read a FASTA file into an ordered id -> sequence mapping

    The id is the first whitespace-delimited word of the header. When an id
    occurs more than once the first entry is kept.
    """
    sequences: Dict[str, str] = {}
    for title, sequence in iter_fasta(file_path):
        seq_id = title.split(None, 1)[0] if title else ''
        if not seq_id:
            logger.warning(f"Skipping FASTA entry with empty header in {file_path}")
            continue
        if seq_id in sequences:
            logger.warning(f"Duplicate sequence id {seq_id} in {file_path}; keeping the first")
            continue
        sequences[seq_id] = sequence
    return sequences


def read_ids(file_path: str) -> List[str]:
    """Sequence ids of a FASTA file in file order"""
    return list(read_fasta(file_path))


def wrap_sequence(sequence: str, line_width: int = LINE_WIDTH) -> List[str]:
    """Split a sequence into lines of at most line_width characters"""
    return [sequence[i:i + line_width] for i in range(0, len(sequence), line_width)]


def write_fasta(file_path: str, records: Iterable[Tuple[str, str]],
                line_width: int = LINE_WIDTH) -> int:
    """Write (header, sequence) pairs as wrapped FASTA

    Args:
        file_path: Destination path
        records: Header (without '>') and sequence pairs, written in order
        line_width: Width of sequence lines

    Returns:
        Number of records written

    Raises:
        FileOperationError: If file cannot be written
    """
    count = 0
    try:
        with atomic_write(file_path, 'w') as f:
            for header, sequence in records:
                f.write(f">{header}\n")
                for line in wrap_sequence(sequence, line_width):
                    f.write(f"{line}\n")
                count += 1
    except OSError as e:
        error_msg = f"Error writing FASTA file {file_path}: {str(e)}"
        logger.error(error_msg)
        raise FileOperationError(error_msg, {"file_path": file_path}) from e

    logger.debug(f"Wrote {count} sequences to {file_path}")
    return count
