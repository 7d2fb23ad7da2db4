from .errors     import XTxidError, MismatchedArgumentsError, ParseError, MissingKeyError, Base64Error, HttpError, HttpStatusError
from .numeric    import js_round, round_half_away, float_to_hex, lerp, interpolate, rotation_matrix, solve, odd_coefficient
from .cubic      import CubicCurve
from .extractor  import extract_ondemand_url, verification_key, parse_indices, animation_frames, parse_path_to_coordinates, frame_data
from .signature  import KeyMaterial, ClientTransaction, animate, compute_animation_key, derive_key_material, current_time, generate_sign
from .config     import Settings
from .transport  import Response, Transport, CurlTransport, HttpxTransport, fetch_pages, fetch_client

__version__ = "0.1.0"
