import pytest
import sys
from pathlib import Path
from PIL import Image

# Add src to sys.path so we can import album_layout
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from album_layout.core.models import ImageRef  # noqa: E402
from album_layout.engine.config import LayoutSettings  # noqa: E402


# Common test fixtures
@pytest.fixture
def make_images():
    """Factory for ImageRef lists: make_images(4) or make_images(3, size=(1600, 900))."""
    def _create(count: int, size=None, prefix: str = "img"):
        width, height = size if size is not None else (None, None)
        return [ImageRef(f"{prefix}-{i}", width, height) for i in range(count)]
    return _create


@pytest.fixture
def settings() -> LayoutSettings:
    """Default settings: A4 landscape, hardcoded full cover, 4 x 2."""
    return LayoutSettings()


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def total_area():
    """Sum of rectangle areas of an arranged page."""
    def _area(positioned) -> float:
        return sum(p.rect.area for p in positioned)
    return _area


@pytest.fixture
def assert_no_overlap():
    """Assert that no two rectangles of an arranged page share interior area."""
    def _check(positioned) -> None:
        for i, a in enumerate(positioned):
            for b in positioned[i + 1:]:
                assert not a.rect.intersects(b.rect, tolerance=1e-6), (a, b)
    return _check
