"""
Tests for backing buffers.

Tests the buffers in sigmat.buffer:
- Lifecycle: allocate once, use after allocation
- Index checks
- Encoding: float, rounded int, quantized bytes, sparse
- copy() and to_numpy()
- BufferRegistry
"""

import pytest
import numpy as np

import sigmat
from sigmat.buffer import (
    BackingBuffer,
    FloatBackingBuffer,
    IntBackingBuffer,
    SignedByteBackingBuffer,
    UnsignedByteBackingBuffer,
    SparseBackingBuffer,
    BufferRegistry,
)
from sigmat.buffer._memory import allocate_block, copy_block, is_native
from sigmat.error import (
    BufferStateError,
    MatrixIndexError,
    MatrixValueError,
    SIGMAT_ERROR_RANGE_ERROR,
)


ALL_BUFFERS = [
    FloatBackingBuffer,
    IntBackingBuffer,
    SignedByteBackingBuffer,
    UnsignedByteBackingBuffer,
    SparseBackingBuffer,
]


# =============================================================================
# Lifecycle Tests
# =============================================================================

class TestLifecycle:
    """Test allocate-once-then-use."""

    @pytest.mark.parametrize("cls", ALL_BUFFERS)
    def test_allocate(self, cls):
        """Test allocation sets size and state."""
        buf = cls()
        assert not buf.is_allocated
        assert buf.size == 0

        buf.allocate(6)
        assert buf.is_allocated
        assert buf.size == 6
        assert len(buf) == 6

    @pytest.mark.parametrize("cls", ALL_BUFFERS)
    def test_fresh_buffer_reads_zero(self, cls):
        """Test freshly allocated slots read 0."""
        buf = cls()
        buf.allocate(4)
        assert all(buf.get(i) == 0.0 for i in range(4))

    @pytest.mark.parametrize("cls", ALL_BUFFERS)
    def test_allocate_twice_raises(self, cls):
        """Test second allocation is rejected."""
        buf = cls()
        buf.allocate(3)
        with pytest.raises(BufferStateError):
            buf.allocate(3)

    @pytest.mark.parametrize("cls", ALL_BUFFERS)
    def test_get_before_allocate_raises(self, cls):
        """Test reads before allocation are rejected."""
        with pytest.raises(BufferStateError):
            cls().get(0)

    @pytest.mark.parametrize("cls", ALL_BUFFERS)
    def test_set_before_allocate_raises(self, cls):
        """Test writes before allocation are rejected."""
        with pytest.raises(BufferStateError):
            cls().set(0, 0.5)

    def test_buffer_state_error_is_runtime_error(self):
        """Test BufferStateError can be caught as RuntimeError."""
        with pytest.raises(RuntimeError):
            FloatBackingBuffer().get(0)

    def test_allocation_check_disabled(self):
        """Test allocation check follows DebugConfig."""
        sigmat.set_debug(check_allocation=False)
        buf = FloatBackingBuffer()
        buf.allocate(2)
        buf.allocate(4)
        assert buf.size == 4

    def test_abstract_base(self):
        """Test BackingBuffer cannot be instantiated."""
        with pytest.raises(TypeError):
            BackingBuffer()


# =============================================================================
# Index Tests
# =============================================================================

class TestIndexChecks:
    """Test linear index validation."""

    @pytest.mark.parametrize("cls", ALL_BUFFERS)
    @pytest.mark.parametrize("index", [-1, 5, 100])
    def test_out_of_range(self, cls, index):
        """Test indices outside [0, size) are rejected."""
        buf = cls()
        buf.allocate(5)
        with pytest.raises(MatrixIndexError):
            buf.get(index)
        with pytest.raises(MatrixIndexError):
            buf.set(index, 0.0)

    def test_index_error_is_index_error(self):
        """Test MatrixIndexError can be caught as IndexError."""
        buf = FloatBackingBuffer()
        buf.allocate(1)
        with pytest.raises(IndexError):
            buf.get(1)

    def test_zero_size(self):
        """Test a zero-sized buffer rejects every index."""
        buf = FloatBackingBuffer()
        buf.allocate(0)
        with pytest.raises(MatrixIndexError):
            buf.get(0)


# =============================================================================
# Float / Int Tests
# =============================================================================

class TestFloatBuffer:
    """Test FloatBackingBuffer."""

    @pytest.mark.parametrize("direct", [False, True])
    def test_exact_storage(self, direct):
        """Test representable values round trip exactly."""
        buf = FloatBackingBuffer(direct=direct)
        buf.allocate(3)
        buf.set(0, 0.25)
        buf.set(1, -1024.0)
        buf.set(2, 3.5)
        assert buf.get(0) == 0.25
        assert buf.get(1) == -1024.0
        assert buf.get(2) == 3.5

    def test_float64(self):
        """Test float64 keeps full precision."""
        buf = FloatBackingBuffer(dtype='float64')
        buf.allocate(1)
        buf.set(0, 0.1)
        assert buf.get(0) == 0.1

    def test_default_dtype_round_trip(self):
        """Test the default dtype keeps Python floats exactly."""
        buf = FloatBackingBuffer()
        assert buf.dtype == 'float64'
        buf.allocate(1)
        buf.set(0, 0.1)
        assert buf.get(0) == 0.1

    def test_float32_opt_in(self):
        """Test float32 rounds to single precision."""
        buf = FloatBackingBuffer(dtype='float32')
        buf.allocate(1)
        buf.set(0, 0.1)
        assert buf.get(0) == float(np.float32(0.1))
        assert buf.representable(0.1) == buf.get(0)

    @pytest.mark.parametrize("value", [1e40, -1e40])
    def test_float32_overflow(self, value):
        """Test finite values beyond float32 are rejected, not stored as inf."""
        buf = FloatBackingBuffer(dtype='float32')
        buf.allocate(2)
        with pytest.raises(MatrixValueError) as exc_info:
            buf.set(0, value)
        assert exc_info.value.code == SIGMAT_ERROR_RANGE_ERROR
        with pytest.raises(MatrixValueError):
            buf.fill(value)
        np.testing.assert_array_equal(buf.to_numpy(), [0.0, 0.0])

    def test_infinity_is_stored(self):
        """Test infinities are representable at every float dtype."""
        buf = FloatBackingBuffer(dtype='float32')
        buf.allocate(1)
        buf.set(0, float('inf'))
        assert buf.get(0) == float('inf')

    def test_invalid_dtype(self):
        """Test non-float dtypes are rejected."""
        with pytest.raises(MatrixValueError):
            FloatBackingBuffer(dtype='int8')

    def test_direct_block_is_native_and_aligned(self):
        """Test direct buffers live in aligned native memory."""
        buf = FloatBackingBuffer(direct=True)
        buf.allocate(16)
        assert buf.direct
        assert is_native(buf._block)
        assert buf._block.ctypes.data % 64 == 0
        assert buf.nbytes == 16 * 8

    def test_fill(self):
        """Test fill sets every slot."""
        buf = FloatBackingBuffer()
        buf.allocate(4)
        buf.fill(2.0)
        np.testing.assert_array_equal(buf.to_numpy(), [2.0, 2.0, 2.0, 2.0])


class TestIntBuffer:
    """Test IntBackingBuffer rounding."""

    @pytest.mark.parametrize("value, expected", [
        (2.5, 3.0),
        (2.4, 2.0),
        (-2.5, -2.0),
        (-2.6, -3.0),
        (7.0, 7.0),
    ])
    def test_round_half_up(self, value, expected):
        """Test values round half up."""
        buf = IntBackingBuffer()
        buf.allocate(1)
        buf.set(0, value)
        assert buf.get(0) == expected

    @pytest.mark.parametrize("value", [float('nan'), float('inf'), 2.0 ** 40, -2.0 ** 40])
    def test_unrepresentable(self, value):
        """Test NaN and values outside int32 are rejected."""
        buf = IntBackingBuffer()
        buf.allocate(1)
        with pytest.raises(MatrixValueError) as exc_info:
            buf.set(0, value)
        assert exc_info.value.code == SIGMAT_ERROR_RANGE_ERROR

    def test_dtype(self):
        """Test storage element type."""
        assert IntBackingBuffer().dtype == 'int32'


# =============================================================================
# Quantized Tests
# =============================================================================

class TestSignedByteBuffer:
    """Test SignedByteBackingBuffer quantization."""

    def test_round_trip_tolerance(self):
        """Test 0.5 round trips within one quantization step."""
        buf = SignedByteBackingBuffer()
        buf.allocate(1)
        buf.set(0, 0.5)
        assert abs(buf.get(0) - 0.5) <= 1 / 127

    @pytest.mark.parametrize("value", [-1.0, 1.0, 0.0])
    def test_bounds_exact(self, value):
        """Test range ends and zero are exact."""
        buf = SignedByteBackingBuffer()
        buf.allocate(1)
        buf.set(0, value)
        assert buf.get(0) == value

    def test_truncates(self):
        """Test encoding truncates toward zero."""
        buf = SignedByteBackingBuffer()
        buf.allocate(2)
        buf.set(0, 0.5)
        buf.set(1, -0.5)
        assert buf.get(0) == pytest.approx(63 / 127)
        assert buf.get(1) == pytest.approx(-63 / 127)

    @pytest.mark.parametrize("value", [1.5, -1.01, float('nan')])
    def test_out_of_range(self, value):
        """Test values outside [-1, 1] are rejected."""
        buf = SignedByteBackingBuffer()
        buf.allocate(1)
        with pytest.raises(MatrixValueError):
            buf.set(0, value)

    def test_one_byte_per_slot(self):
        """Test storage footprint."""
        buf = SignedByteBackingBuffer()
        buf.allocate(100)
        assert buf.nbytes == 100

    def test_representable(self):
        """Test representable matches a stored read and validates."""
        buf = SignedByteBackingBuffer()
        assert buf.representable(0.5) == pytest.approx(63 / 127)
        with pytest.raises(MatrixValueError):
            buf.representable(2.0)
        buf.allocate(1)
        buf.set(0, 0.5)
        assert buf.get(0) == buf.representable(0.5)


class TestUnsignedByteBuffer:
    """Test UnsignedByteBackingBuffer quantization."""

    def test_round_trip_tolerance(self):
        """Test 0.5 round trips within one quantization step."""
        buf = UnsignedByteBackingBuffer()
        buf.allocate(1)
        buf.set(0, 0.5)
        assert abs(buf.get(0) - 0.5) <= 1 / 255

    def test_range_ends(self):
        """Test 0 and 1 are exact."""
        buf = UnsignedByteBackingBuffer()
        buf.allocate(2)
        buf.set(0, 0.0)
        buf.set(1, 1.0)
        assert buf.get(0) == 0.0
        assert buf.get(1) == 1.0

    @pytest.mark.parametrize("value", [-0.1, 1.1, float('nan')])
    def test_out_of_range(self, value):
        """Test values outside [0, 1] are rejected."""
        buf = UnsignedByteBackingBuffer()
        buf.allocate(1)
        with pytest.raises(MatrixValueError):
            buf.set(0, value)

    def test_to_numpy_decodes(self):
        """Test to_numpy returns decoded values."""
        buf = UnsignedByteBackingBuffer()
        buf.allocate(2)
        buf.set(1, 1.0)
        np.testing.assert_allclose(buf.to_numpy(), [0.0, 1.0])


# =============================================================================
# Sparse Tests
# =============================================================================

class TestSparseBuffer:
    """Test SparseBackingBuffer."""

    def test_only_non_default_stored(self):
        """Test occupancy tracks non-default values."""
        buf = SparseBackingBuffer()
        buf.allocate(1_000_000)
        buf.set(42, 3.0)
        assert buf.nnz == 1
        assert buf.get(42) == 3.0
        assert buf.get(43) == 0.0

        buf.set(42, 0.0)
        assert buf.nnz == 0

    def test_custom_default(self):
        """Test missing entries read as the default."""
        buf = SparseBackingBuffer(default=-1.0)
        buf.allocate(3)
        assert buf.get(2) == -1.0
        buf.set(0, 5.0)
        np.testing.assert_array_equal(buf.to_numpy(), [5.0, -1.0, -1.0])

    def test_representable(self):
        """Test sparse storage keeps values as given."""
        assert SparseBackingBuffer().representable(0.1) == 0.1
        assert IntBackingBuffer().representable(2.5) == 3.0

    def test_fill(self):
        """Test fill with default clears, other values occupy every slot."""
        buf = SparseBackingBuffer()
        buf.allocate(4)
        buf.fill(1.0)
        assert buf.nnz == 4
        buf.fill(0.0)
        assert buf.nnz == 0


# =============================================================================
# Copy Tests
# =============================================================================

class TestCopy:
    """Test deep copies."""

    @pytest.mark.parametrize("cls", ALL_BUFFERS)
    def test_copy_is_independent(self, cls):
        """Test a copy has the same contents but its own storage."""
        buf = cls()
        buf.allocate(3)
        buf.set(1, 1.0)

        clone = buf.copy()
        assert clone.is_allocated
        assert clone.size == 3
        assert clone.get(1) == buf.get(1)

        clone.set(1, 0.0)
        assert buf.get(1) == 1.0

    def test_copy_direct_stays_native(self):
        """Test direct buffers copy into native memory."""
        buf = FloatBackingBuffer(direct=True)
        buf.allocate(8)
        assert is_native(buf.copy()._block)

    def test_copy_unallocated(self):
        """Test copying an unallocated buffer."""
        clone = FloatBackingBuffer().copy()
        assert not clone.is_allocated


# =============================================================================
# Memory Block Tests
# =============================================================================

class TestMemoryBlocks:
    """Test raw block allocation."""

    @pytest.mark.parametrize("dtype", ['float32', 'float64', 'int32', 'int8', 'uint8'])
    def test_allocate_block(self, dtype):
        """Test heap and native blocks are zeroed with the right dtype."""
        for direct in (False, True):
            block = allocate_block(10, dtype, direct)
            assert block.dtype == np.dtype(dtype)
            assert len(block) == 10
            assert not block.any()

    def test_copy_block(self):
        """Test copies are independent."""
        block = allocate_block(4, 'float32')
        block[2] = 1.0
        new = copy_block(block)
        new[2] = 2.0
        assert block[2] == 1.0

    def test_invalid_arguments(self):
        """Test negative sizes and unknown dtypes."""
        with pytest.raises(MatrixValueError):
            allocate_block(-1, 'float32')
        with pytest.raises(MatrixValueError):
            allocate_block(1, 'complex64')


# =============================================================================
# Registry Tests
# =============================================================================

class TestBufferRegistry:
    """Test BufferRegistry."""

    def test_defaults(self):
        """Test the built-in names."""
        registry = BufferRegistry.with_defaults()
        assert registry.names() == ['float', 'int', 'signed_byte', 'unsigned_byte', 'sparse']
        assert 'sparse' in registry

    @pytest.mark.parametrize("name, cls", [
        ('float', FloatBackingBuffer),
        ('int', IntBackingBuffer),
        ('signed_byte', SignedByteBackingBuffer),
        ('unsigned_byte', UnsignedByteBackingBuffer),
        ('sparse', SparseBackingBuffer),
    ])
    def test_create(self, name, cls):
        """Test factories build unallocated buffers of the right type."""
        buf = BufferRegistry.with_defaults().create(name)
        assert isinstance(buf, cls)
        assert not buf.is_allocated

    def test_create_passes_options(self):
        """Test direct and dtype reach the factory."""
        buf = BufferRegistry.with_defaults().create('float', direct=True, dtype='float64')
        assert buf.direct
        assert buf.dtype == 'float64'

    def test_unknown_name(self):
        """Test unknown names are rejected."""
        with pytest.raises(MatrixValueError):
            BufferRegistry.with_defaults().create('half')

    def test_register(self):
        """Test custom registrations and duplicates."""
        registry = BufferRegistry()
        registry.register('half', lambda direct, dtype: FloatBackingBuffer(direct, 'float32'))
        assert registry.create('half').dtype == 'float32'

        with pytest.raises(MatrixValueError):
            registry.register('half', lambda direct, dtype: FloatBackingBuffer())
        registry.register('half', lambda direct, dtype: IntBackingBuffer(), replace=True)
        assert isinstance(registry.create('half'), IntBackingBuffer)

    def test_unregister_and_copy(self):
        """Test copies are independent of their source."""
        registry = BufferRegistry.with_defaults()
        clone = registry.copy()
        clone.unregister('sparse')
        assert 'sparse' in registry
        assert 'sparse' not in clone
        with pytest.raises(MatrixValueError):
            clone.unregister('sparse')
