"""
cptdecrypt Batch Decryptor
Runs many containers through one Decryptor on a thread pool.
Each job opens its own container and output file; only the private key is shared.
"""
import os
import time
from pathlib import Path
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Dict, Optional, Callable, Tuple
from ..config import config as default_config
from ..utils.logger import logger
from .decryptor import Decryptor

Job = Tuple[Path, Path]


class BatchDecryptor:
    def __init__(self, private_key, max_workers: int = None, config=None):
        self.config = config or default_config
        self.max_workers = (
            max_workers
            or self.config.max_workers
            or min(32, (os.cpu_count() or 4) * 2)
        )
        self.decryptor = Decryptor(private_key, config=self.config)

    def decrypt_directory(
        self,
        input_dir: str,
        output_dir: str = None,
        recursive: bool = False,
        on_progress: Optional[Callable] = None
    ) -> Dict:
        """
        Decrypt every container in a directory.

        Args:
            input_dir: directory containing containers
            output_dir: where plaintext files go (default: next to each container)
            recursive: walk subdirectories, mirroring them under output_dir
            on_progress: optional callback(completed, total, record)

        Returns:
            summary dict, see run()
        """
        root = Path(input_dir)
        if not root.is_dir():
            raise ValueError(f"Input directory not found: {input_dir}")

        pattern = f"*{self.config.extension}"
        found = root.rglob(pattern) if recursive else root.glob(pattern)
        containers = sorted(p for p in found if p.is_file())
        if not containers:
            logger.warning(f"No {pattern} files found in {input_dir}")

        jobs = []
        for container in containers:
            target_dir = output_dir
            if output_dir is not None and recursive:
                target_dir = Path(output_dir) / container.relative_to(root).parent
            jobs.append((container, self.decryptor.output_path_for(container, target_dir)))
        return self.run(jobs, on_progress)

    def decrypt_files(
        self,
        file_paths: List[str],
        output_dir: str = None,
        on_progress: Optional[Callable] = None
    ) -> Dict:
        """Decrypt a given list of containers into output_dir (default: beside each one)"""
        jobs = [(Path(f), self.decryptor.output_path_for(f, output_dir)) for f in file_paths]
        return self.run(jobs, on_progress)

    def run(self, jobs: List[Job], on_progress: Optional[Callable] = None) -> Dict:
        """
        Decrypt (container, output path) pairs concurrently.

        A container that fails becomes a failure record; the rest of the
        batch carries on. Colliding output paths are a ValueError up front.

        Returns:
            {
              'success', 'total', 'succeeded', 'failed',
              'results':  [{'file', 'output_path', 'segments', 'bytes_written', 'checksum', 'time'}],
              'failures': [{'file', 'error', 'error_type'}],
              'segments', 'bytes_written', 'processing_time'
            }
        """
        targets = [out for _, out in jobs]
        if len(set(targets)) != len(targets):
            raise ValueError("Several containers map to the same output file")

        started = time.time()
        records = []
        if jobs:
            logger.info(f"🔓 Decrypting {len(jobs)} containers on {self.max_workers} workers")
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                pending = [pool.submit(self._attempt, src, dst) for src, dst in jobs]
                for done, future in enumerate(as_completed(pending), start=1):
                    record = future.result()
                    records.append(record)
                    self._report(done, len(jobs), record)
                    if on_progress:
                        on_progress(done, len(jobs), record)

        return self._summarize(records, time.time() - started)

    def _attempt(self, src: Path, dst: Path) -> Dict:
        try:
            result = self.decryptor.decrypt_file(src, dst)
        except Exception as e:
            return {'file': str(src), 'error': str(e), 'error_type': type(e).__name__}

        return {
            'file': str(src),
            'output_path': result['output_path'],
            'segments': result['segments'],
            'bytes_written': result['bytes_written'],
            'checksum': result['checksum'],
            'time': result['time'],
        }

    def _report(self, done: int, total: int, record: Dict):
        name = Path(record['file']).name
        if 'error' in record:
            # Decryptor has already logged the failure itself
            logger.debug(f"   [{done}/{total}] {name} failed ({record['error_type']})")
        else:
            logger.info(
                f"   [{done}/{total}] {name}: {record['segments']} segments, "
                f"{record['bytes_written']} bytes"
            )

    def _summarize(self, records: List[Dict], elapsed: float) -> Dict:
        results = [r for r in records if 'error' not in r]
        failures = [r for r in records if 'error' in r]
        segments = sum(r['segments'] for r in results)
        written = sum(r['bytes_written'] for r in results)

        if records:
            logger.info(
                f"✨ Batch done: {len(results)}/{len(records)} containers, "
                f"{segments} segments, {written/1024/1024:.2f} MB in {elapsed:.2f}s"
            )
            if failures:
                logger.warning(f"⚠️  {len(failures)} container(s) failed")

        return {
            'success': not failures,
            'total': len(records),
            'succeeded': len(results),
            'failed': len(failures),
            'results': results,
            'failures': failures,
            'segments': segments,
            'bytes_written': written,
            'processing_time': elapsed,
        }


__all__ = ["BatchDecryptor"]
