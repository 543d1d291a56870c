"""Archive providers.

tar-based writer and reader.  Both shell out to the system ``tar`` with an
external compressor (``pigz`` by default) so compression runs outside the
Python process and several archives can be built in parallel.
"""

from buildcache.providers.archive.tar_reader import TarArchiveReader
from buildcache.providers.archive.tar_writer import TarArchiveWriter

__all__ = ["TarArchiveReader", "TarArchiveWriter"]
