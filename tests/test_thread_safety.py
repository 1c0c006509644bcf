"""Concurrent compiles with different configurations must not interfere."""

from concurrent.futures import ThreadPoolExecutor

from gotita import Djot, ParseConfig, RenderOptions, compile


class TestThreadSafety:
    def test_concurrent_configs(self) -> None:
        smart = ParseConfig(smart_punctuation=True)
        plain = ParseConfig(smart_punctuation=False)

        def work(i: int) -> tuple[int, str]:
            config = smart if i % 2 else plain
            return i, compile(f"# {i}\n\na--b", config=config).html

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(work, range(200)))

        for i, html in results:
            dash = "a–b" if i % 2 else "a--b"
            assert html == f"<h1>{i}</h1>\n<p>{dash}</p>\n"

    def test_shared_djot_instance(self) -> None:
        djot = Djot(RenderOptions(heading_ids=True))
        sources = [f"# Title {i}\n\n# Title {i}" for i in range(50)]

        with ThreadPoolExecutor(max_workers=8) as executor:
            outputs = list(executor.map(djot, sources))

        for i, html in enumerate(outputs):
            assert html == (
                f'<h1 id="Title-{i}">Title {i}</h1>\n<h1 id="Title-{i}-1">Title {i}</h1>\n'
            )
