import hashlib
import struct

from py_ecc.optimized_bn128 import FQ, Z1, b, field_modulus, is_inf, is_on_curve, normalize

from field import FIELD_SIZE_BYTES, Fr, from_bytes, to_bytes


class TranscriptError(Exception):
    """Raised when proof bytes cannot be parsed into the expected value."""


class Uint32Codec:
    """4-byte big-endian unsigned integer (sizes and counts)."""

    size = 4

    def encode(self, value):
        return struct.pack(">I", value)

    def decode(self, data):
        return struct.unpack(">I", data)[0]


class FieldCodec:
    """Canonical 32-byte big-endian scalar field element."""

    size = FIELD_SIZE_BYTES

    def encode(self, value):
        return to_bytes(value)

    def decode(self, data):
        try:
            return from_bytes(data)
        except ValueError as e:
            raise TranscriptError(str(e)) from e


class FieldVector:
    """Fixed-length vector of scalar field elements."""

    def __init__(self, count):
        self.count = count
        self.size = count * FIELD_SIZE_BYTES

    def encode(self, values):
        if len(values) != self.count:
            raise ValueError(f"expected {self.count} field elements, got {len(values)}")
        return b"".join(to_bytes(values[i]) for i in range(self.count))

    def decode(self, data):
        result = Fr.Zeros(self.count)
        for i in range(self.count):
            chunk = data[i * FIELD_SIZE_BYTES:(i + 1) * FIELD_SIZE_BYTES]
            result[i] = FIELD.decode(chunk)
        return result


class G1Codec:
    """
    Affine BN254 G1 point as x || y (32 bytes each). The point at infinity is
    encoded as 64 zero bytes.
    """

    size = 2 * FIELD_SIZE_BYTES

    def encode(self, point):
        if is_inf(point):
            return bytes(self.size)
        x, y = normalize(point)
        return x.n.to_bytes(FIELD_SIZE_BYTES, "big") + y.n.to_bytes(FIELD_SIZE_BYTES, "big")

    def decode(self, data):
        x = int.from_bytes(data[:FIELD_SIZE_BYTES], "big")
        y = int.from_bytes(data[FIELD_SIZE_BYTES:], "big")
        if x == 0 and y == 0:
            return Z1
        if x >= field_modulus or y >= field_modulus:
            raise TranscriptError("non-canonical curve point coordinate")
        point = (FQ(x), FQ(y), FQ.one())
        if not is_on_curve(point, b):
            raise TranscriptError("point is not on the curve")
        return point


UINT32 = Uint32Codec()
FIELD = FieldCodec()
POINT = G1Codec()


class Transcript:
    """
    Handles protocol transcript and deterministic challenge generation for Fiat-Shamir transform.

    This class maintains the state of all messages exchanged during a zero-knowledge proof protocol
    and generates deterministic challenges that depend on the cumulative transcript history.
    It ensures that challenges are consistent between prover and verifier.
    """

    def __init__(self, label, F):
        """
        Initialize a new transcript with a protocol label.

        Args:
            label: A string label identifying this protocol instance
            F: The finite field used in the protocol
        """
        self.label = label
        self.F = F
        self.state = hashlib.sha256(label.encode()).digest()

    def append_message(self, message_label, message_data):
        """
        Append a message to the transcript to update its state.

        Args:
            message_label: A string label for this message (e.g., "W_1")
            message_data: Serialized message bytes
        """
        self._update_state(message_label, message_data)

    def get_challenge(self, label):
        """
        Generate a deterministic challenge field element based on the current transcript state.

        Args:
            label: A label for this challenge (e.g., "beta")

        Returns:
            A field element derived from the current transcript state
        """
        # Generate deterministic challenge from current state and label
        challenge_state = hashlib.sha256(self.state + label.encode()).digest()

        # Reduce the 256-bit digest into the field
        challenge_int = int.from_bytes(challenge_state, byteorder='big') % self.F.order
        challenge = self.F(challenge_int)

        # Update the transcript state to include this challenge
        self._update_state(label, challenge_state)

        return challenge

    def get_challenges(self, *labels):
        """
        Generate one challenge per label, in order.

        Returns:
            tuple of field elements
        """
        return tuple(self.get_challenge(label) for label in labels)

    def _update_state(self, label, data):
        """
        Update the internal transcript state with a new message.

        Args:
            label: Label for the message
            data: Serialized message data
        """
        # Update state: H(state || label || data)
        hasher = hashlib.sha256()
        hasher.update(self.state)
        hasher.update(label.encode())
        hasher.update(data)
        self.state = hasher.digest()


class ProverTranscript(Transcript):
    """
    Prover side of the transcript: every message sent to the verifier is
    serialized into the proof and absorbed into the hash state.
    """

    def __init__(self, label, F):
        super().__init__(label, F)
        self.proof_data = bytearray()

    def send_to_verifier(self, label, value, codec):
        """
        Serialize a value into the proof and absorb it.

        Args:
            label: Message label
            value: Value to send
            codec: One of UINT32, FIELD, POINT or a FieldVector
        """
        data = codec.encode(value)
        self.proof_data += data
        self.append_message(label, data)

    def export_proof(self):
        """Return the accumulated proof bytes."""
        return bytes(self.proof_data)


class VerifierTranscript(Transcript):
    """
    Verifier side of the transcript: reads the prover's messages back out of
    the proof bytes in order, absorbing exactly the same bytes.
    """

    def __init__(self, label, F, proof_data):
        super().__init__(label, F)
        self.proof_data = bytes(proof_data)
        self.offset = 0

    def receive_from_prover(self, label, codec):
        """
        Deserialize the next labeled value from the proof.

        Args:
            label: Message label (must match the prover's)
            codec: Codec describing the expected value

        Returns:
            The decoded value

        Raises:
            TranscriptError: if the proof is too short or the value is malformed
        """
        end = self.offset + codec.size
        if end > len(self.proof_data):
            raise TranscriptError(f"proof too short while reading '{label}'")
        data = self.proof_data[self.offset:end]
        self.offset = end
        value = codec.decode(data)
        self.append_message(label, data)
        return value

    def assert_consumed(self):
        """Reject proofs carrying bytes the protocol never read."""
        if self.offset != len(self.proof_data):
            raise TranscriptError(f"{len(self.proof_data) - self.offset} trailing proof bytes")
