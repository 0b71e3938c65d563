from enum import Enum


class ElementType(Enum):
    '''Voxel element types, valued with the "datatype" code of the NIfTI-1 header.'''
    UINT8   = 2
    INT16   = 4
    INT32   = 8
    FLOAT32 = 16
    FLOAT64 = 64
    INT8    = 256
    UINT16  = 512
    UINT32  = 768
    INT64   = 1024
    UINT64  = 1280
