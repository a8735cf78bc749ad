import operator
import re
from dataclasses import dataclass

from fractals.errors import InvalidParameter


def parse_complex(text):
    # accept "a+bj", "a+bi" and "a,b"
    text = str(text).strip().replace(" ", "")
    try:
        if "," in text:
            real, imag = text.split(",")
            return complex(float(real), float(imag))
        return complex(re.sub(r"i$", "j", text))
    except ValueError:
        raise InvalidParameter(f"not a complex number: {text!r}") from None


@dataclass(frozen=True)
class ComplexRange:
    start: complex
    end: complex

    def __post_init__(self):
        object.__setattr__(self, "start", complex(self.start))
        object.__setattr__(self, "end", complex(self.end))

    @property
    def imaginary_reversed(self):
        # row 0 maps to the largest imaginary value, as images are drawn top down
        return ComplexRange(
            complex(self.start.real, self.end.imag),
            complex(self.end.real, self.start.imag),
        )

    @classmethod
    def parse(cls, text):
        """
        Parse a region from the command line.

        Either four comma separated floats ``re0,im0,re1,im1`` or two
        complex literals separated by a colon, ``-2-1.3j:1+1.3j``.
        """
        text = str(text).strip()
        if ":" in text:
            start, end = text.split(":", 1)
            return cls(parse_complex(start), parse_complex(end))
        parts = text.split(",")
        if len(parts) != 4:
            raise InvalidParameter(f"region needs four numbers, got {text!r}")
        try:
            re0, im0, re1, im1 = (float(p) for p in parts)
        except ValueError:
            raise InvalidParameter(f"region needs four numbers, got {text!r}") from None
        return cls(complex(re0, im0), complex(re1, im1))

    def __str__(self):
        return f"{self.start.real},{self.start.imag},{self.end.real},{self.end.imag}"


@dataclass(frozen=True)
class ImageSize:
    rows: int
    cols: int

    def __post_init__(self):
        try:
            rows, cols = operator.index(self.rows), operator.index(self.cols)
        except TypeError:
            raise InvalidParameter(
                f"image size must be integers, got rows={self.rows!r} cols={self.cols!r}") from None
        if rows < 1 or cols < 1:
            raise InvalidParameter(
                f"image size must be positive, got rows={rows} cols={cols}")
        object.__setattr__(self, "rows", rows)
        object.__setattr__(self, "cols", cols)

    def __getitem__(self, idx):
        return (self.rows, self.cols)[idx]

    def __iter__(self):
        return iter((self.rows, self.cols))

    @property
    def shape(self):
        return (self.rows, self.cols)

    @classmethod
    def parse(cls, text):
        text = str(text).strip().lower().replace("x", ",")
        parts = [p for p in text.split(",") if p]
        try:
            dims = [int(p) for p in parts]
        except ValueError:
            raise InvalidParameter(f"image size must be integers, got {text!r}") from None
        if len(dims) == 1:
            dims = dims * 2
        if len(dims) != 2:
            raise InvalidParameter(f"image size needs rows and cols, got {text!r}")
        return cls(*dims)

    def __str__(self):
        return f"{self.rows},{self.cols}"
