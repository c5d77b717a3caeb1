#!/bin/python3
# (c) fenugrec 2025

# Extract EDisk images (removable disk images) embedded in a ROM.
# Containers start on a 64k boundary; each one found is decoded block by block
# and written to "EDisk-<rom offset>.dsk".
# A bad container is reported and skipped, unless --strict.


from argparse import ArgumentParser
import collections
import logging
import mmap
import os
import sys

from edisk_errors import EDiskError
from edisk_hdr import HDR_SIZE, SCAN_STRIDE, parse_hdr, hdr_info
from edisk_blocks import read_block_table, decode_block

log = logging.getLogger(__name__)

scan_result = collections.namedtuple('scan_result', 'found written failed')


def scan_offsets(mem, stride=SCAN_STRIDE):
	for location in range(0, len(mem), stride):
		if len(mem) - location < HDR_SIZE:
			continue
		yield location

# yields (location, edisk_hdr) for each container, or (location, EDiskError) for broken ones
def find_edisks(mem, stride=SCAN_STRIDE):
	for location in scan_offsets(mem, stride):
		try:
			hdr = parse_hdr(mem, location)
		except EDiskError as e:
			yield location, e
			continue
		if hdr is not None:
			yield location, hdr

def disk_name(location):
	return "EDisk-{:06x}.dsk".format(location)

# decode every block; the whole image is built before anything gets written
def extract_disk(mem, hdr):
	data_base = hdr.location + hdr.data_offset
	disk = []
	for idx, ent in enumerate(read_block_table(mem, hdr)):
		log.debug("Block {}: mode {}, offset {:#08x}".format(idx, ent.mode, ent.offset))
		disk.append(decode_block(mem, data_base, ent.mode, ent.offset))
	disk = b''.join(disk)
	assert len(disk) == hdr.disk_len
	return disk

def list_blocks(mem, hdr):
	print(hdr_info(hdr))
	for idx, ent in enumerate(read_block_table(mem, hdr)):
		log.debug("Block {}: mode {}, offset {:#08x}".format(idx, ent.mode, ent.offset))

# returns True if the file was written
def write_disk(out_file, disk, force=False):
	if os.path.exists(out_file) and not force:
		log.warning("{}: file already exists - skipping!".format(out_file))
		return False
	log.info("Writing {}".format(out_file))
	with open(out_file, "wb") as outf:
		outf.write(disk)
	return True

def extract_edisks(mem, outdir=".", info_only=False, force=False, strict=False):
	found = 0
	written = 0
	failed = 0
	for location, hdr in find_edisks(mem):
		found += 1
		try:
			if isinstance(hdr, EDiskError):
				raise hdr
			log.info("Found edisk at {:#08x}".format(location))
			if info_only:
				list_blocks(mem, hdr)
				continue
			disk = extract_disk(mem, hdr)
		except EDiskError as e:
			failed += 1
			log.error("EDisk @ {:#08x}: {}".format(location, e))
			if strict:
				raise
			continue
		if write_disk(os.path.join(outdir, disk_name(location)), disk, force):
			written += 1
	return scan_result(found, written, failed)

def main(argv=None):
	parser = ArgumentParser(description="Extract EDisk images from a ROM")
	parser.add_argument('fname', help="ROM filename")
	parser.add_argument('-o', '--outdir', default=".", help="output directory (default: current dir)")
	parser.add_argument('-i', action="store_true", help="only print EDisk info, don't extract")
	parser.add_argument('-f', '--force', action="store_true", help="overwrite existing output files")
	parser.add_argument('--strict', action="store_true", help="abort on the first bad EDisk")
	parser.add_argument('-v', '--verbose', action="store_true", help="print per-block info")
	args = parser.parse_args(argv)

	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format="%(message)s")

	with open(args.fname, "rb") as f:
		if os.fstat(f.fileno()).st_size == 0:
			print("{}: empty file".format(args.fname))
			return 0
		mm = mmap.mmap(f.fileno(), 0, access=mmap.ACCESS_READ)
	rom_size = mm.size()

	try:
		res = extract_edisks(mm, args.outdir, info_only=args.i, force=args.force, strict=args.strict)
	except EDiskError:
		return 1
	finally:
		mm.close()

	print("Done. {} EDisk(s) found, {} written, {} failed; ROM size {:#x}".format(
		res.found, res.written, res.failed, rom_size))
	return 0

if __name__ == '__main__':
	sys.exit(main())
