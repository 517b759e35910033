import time
import datetime
import psutil

RESPONSE_TIME_WINDOW = 50
MEMORY_THRESHOLD_MB = 250


class SystemMonitor:
    def __init__(self):
        self.start_time = time.time()
        self.request_count = 0
        self.error_count = 0
        self.response_times = []
        self._process = psutil.Process()

    def record_request(self, response_time: float, status_code: int):
        self.request_count += 1

        if len(self.response_times) >= RESPONSE_TIME_WINDOW:
            self.response_times.pop(0)
        self.response_times.append(response_time)

        if status_code >= 500:
            self.error_count += 1

    def uptime(self) -> str:
        return str(datetime.timedelta(seconds=int(time.time() - self.start_time)))

    def get_system_health(self) -> dict:
        memory_mb = self._process.memory_info().rss / 1024 / 1024
        avg_response_time = sum(self.response_times) / len(self.response_times) if self.response_times else 0
        error_rate = (self.error_count / max(self.request_count, 1)) * 100

        issues = []
        if memory_mb > MEMORY_THRESHOLD_MB:
            issues.append(f"High memory usage: {memory_mb:.1f}MB")
        if avg_response_time > 2.0:
            issues.append(f"Slow response times: {avg_response_time:.2f}s")
        if error_rate > 5:
            issues.append(f"High error rate: {error_rate:.1f}%")

        return {
            'health_status': 'degraded' if issues else 'healthy',
            'uptime_seconds': int(time.time() - self.start_time),
            'memory_usage_mb': f"{memory_mb:.1f}",
            'total_requests': self.request_count,
            'server_errors': self.error_count,
            'error_rate_percent': f"{error_rate:.2f}",
            'avg_response_time_ms': f"{avg_response_time * 1000:.2f}",
            'current_issues': issues
        }
