from dissect import cstruct


vmdk_def = """
typedef struct {
    char    magic[4];                           // Magic "KDMV" LE
    uint32  version;                            // Version
    uint32  flags;                              // Flags
    uint64  capacity;                           // The maximum data number of sectors (capacity)
    uint64  grain_size;                         // The grain number of sectors
    uint64  descriptor_offset;                  // The descriptor sector number
    uint64  descriptor_size;                    // The descriptor number of sectors
    uint32  num_grain_table_entries;            // The number of grain table entries
    uint64  secondary_grain_directory_offset;   // The secondary grain directory sector number
    uint64  primary_grain_directory_offset;     // The primary grain directory sector number
    uint64  overhead;                           // The metadata (overhead) number of sectors
    uint8   is_dirty;                           // Value to indicate the VMDK was cleanly closed
    char    single_end_line_char;               // The single end of line character
    char    non_end_line_char;                  // A non end of line character
    char    double_end_line_char;               // The first double end of line character
    uint16  compress_algorithm;                 // The compression method
    // The remainder of the header sector is padding and is never read
} SparseExtentHeader;

#define SPARSE_VERSION                      1
#define SPARSE_MIN_GRAIN_SIZE               8
#define SPARSEFLAG_VALID_NEWLINE_DETECTOR   0x00001
#define SPARSEFLAG_USE_REDUNDANT            0x00002
#define SPARSEFLAG_MAGIC_GTE                0x00004
#define SPARSEFLAG_COMPRESSED               0x10000
#define SPARSEFLAG_EMBEDDED_LBA             0x20000
#define SPARSE_COMPRESSALGORITHM_NONE       0x0000
#define SPARSE_COMPRESSALGORITHM_DEFLATE    0x0001
"""

c_vmdk = cstruct.cstruct()
c_vmdk.load(vmdk_def)

SECTOR_SIZE = 512

SPARSE_MAGIC = b"KDMV"
SPARSE_SINGLE_END_LINE_CHAR = b"\n"
SPARSE_NON_END_LINE_CHAR = b" "
SPARSE_DOUBLE_END_LINE_CHAR = b"\r"
CID_NOPARENT = 0xFFFFFFFF
