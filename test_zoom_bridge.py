#!/usr/bin/env python3
"""
Test script for the Qt host adapter and the replay entry point.

Tests:
- Zoom notifications re-emitted as Qt signals
- Classification results emitted for completed windows
- Replaying recorded samples from JSON and JSON-lines files
"""

import sys
import os
import io
import json
import tempfile

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))


_app = None


def get_app():
    """Create a QCoreApplication instance if none exists."""
    global _app
    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    _app = app
    return app


def test_bridge_signals():
    """Test that zoom and classification notifications become signals."""
    print("Testing signal bridge...")
    from config import AOI
    from gaze_classification.classification_engine import ClassificationEngine
    from ui.zoom_bridge import ZoomSignalBridge

    get_app()
    engine = ClassificationEngine()
    bridge = ZoomSignalBridge(engine)

    changed, reset, ready = [], [], []
    bridge.zoom_changed.connect(changed.append)
    bridge.zoom_reset.connect(reset.append)
    bridge.classification_ready.connect(ready.append)

    result = None
    for i in range(21):
        result = bridge.ingest({'x': 900, 'y': 500, 'aoi': 'c', 'duration': 300}, i * 250)

    assert result is not None
    assert len(ready) == 1 and ready[0] is result
    assert len(changed) == 1
    assert changed[0].zoomed_area == AOI.C
    assert bridge.last_zoom_event is changed[0]

    engine.zoom_controller.reset()
    assert len(reset) == 1
    assert reset[0][AOI.C] == 1.0
    assert bridge.last_zoom_event is None
    print("✓ Zoom notifications emitted as signals")

    bridge.detach()
    assert engine.zoom_controller.on_zoom_change is None
    try:
        bridge.ingest({'x': 900, 'y': 500, 'duration': 300}, 6000)
    except RuntimeError:
        pass
    else:
        raise AssertionError("Detached bridge should not ingest")
    print("✓ Bridge detaches cleanly")


def test_replay_json_lines():
    """Test replaying a JSON-lines recording."""
    print("Testing replay of JSON-lines recording...")
    import main

    samples = [{'x': 900, 'y': 500, 'aoi': 'c', 'duration': 300, 'timestamp': i * 250}
               for i in range(21)]

    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, 'samples.jsonl')
        with open(path, 'w', encoding='utf-8') as f:
            for sample in samples:
                f.write(json.dumps(sample) + "\n")

        loaded = main.load_samples(main.Path(path))
        assert loaded == samples

        out = io.StringIO()
        results = main.replay(loaded, out=out)

    assert len(results) == 1
    assert results[0]['userType'] == 'direct'
    assert results[0]['zoomedArea'] == 'c'
    lines = out.getvalue().strip().splitlines()
    assert len(lines) == 1
    assert json.loads(lines[0])['userType'] == 'direct'
    print("✓ JSON-lines recording replayed")


def test_replay_cli():
    """Test the command line entry point with a JSON array recording."""
    print("Testing replay command line...")
    import main

    samples = [{'x': 900, 'y': 500, 'duration': 300, 'timestamp': i * 250} for i in range(21)]
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, 'samples.json')
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(samples, f)

        assert main.main([path]) == 0
        assert main.main([path, '--window-size', '0']) == 1
        assert main.main([os.path.join(tmp, 'missing.json')]) == 1

        no_timestamp = os.path.join(tmp, 'bad.json')
        with open(no_timestamp, 'w', encoding='utf-8') as f:
            json.dump([{'x': 1, 'y': 1, 'duration': 10}], f)
        assert main.main([no_timestamp]) == 1
    print("✓ Replay command line working")


def run_all_tests():
    """Run all host adapter tests."""
    print("=" * 50)
    print("HOST ADAPTER & REPLAY TESTS")
    print("=" * 50)

    tests = [
        test_bridge_signals,
        test_replay_json_lines,
        test_replay_cli,
    ]

    passed = 0
    for test_func in tests:
        print(f"\n{test_func.__name__}:")
        try:
            test_func()
            passed += 1
        except AssertionError as e:
            print(f"✗ Test failed: {e}")

    print("\n" + "=" * 50)
    print(f"RESULTS: {passed}/{len(tests)} tests passed")
    print("=" * 50)
    return passed == len(tests)


if __name__ == "__main__":
    success = run_all_tests()
    sys.exit(0 if success else 1)
