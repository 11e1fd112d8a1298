"""
Threshold alerts over enriched price points.

Rules are grouped by category (volatility, performance, volume), each level
holding a threshold and a condition. Defaults can be replaced by a YAML
file named by ALERT_RULES_PATH.
"""

import copy
import logging
import os
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from analysis.calculations.volatility import intrabar_volatility_percent
from ingestion.transforms.enrichment import price_change_percent
from patterns.types import as_date

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class AlertConfigError(Exception):
    """Raised when alert rules cannot be loaded."""
    pass


ALERT_TYPES = ('volatility', 'performance', 'volume', 'price', 'trend', 'anomaly')
ALERT_SEVERITIES = ('low', 'medium', 'high', 'critical')
ALERT_CONDITIONS = ('greater_than', 'less_than', 'equals', 'between', 'percentage_change')

DEFAULT_ALERT_RULES = {
    'volatility': {
        'high': {'threshold': 15, 'condition': 'greater_than'},
        'critical': {'threshold': 25, 'condition': 'greater_than'},
    },
    'performance': {
        'bull': {'threshold': 5, 'condition': 'greater_than'},
        'bear': {'threshold': -5, 'condition': 'less_than'},
        'extreme_bull': {'threshold': 15, 'condition': 'greater_than'},
        'extreme_bear': {'threshold': -15, 'condition': 'less_than'},
    },
    'volume': {
        # Thresholds are multiples of average volume
        'high': {'threshold': 2, 'condition': 'percentage_change'},
        'low': {'threshold': 0.5, 'condition': 'percentage_change'},
    },
}

EQUALS_TOLERANCE = 0.01


def _validate_rules(rules: Dict[str, Any]) -> None:
    if not isinstance(rules, dict):
        raise AlertConfigError("Alert rules must be a mapping of categories")

    for category, levels in rules.items():
        if not isinstance(levels, dict):
            raise AlertConfigError(f"Alert category '{category}' must map levels to rules")
        for level, rule in levels.items():
            if not isinstance(rule, dict) or 'threshold' not in rule or 'condition' not in rule:
                raise AlertConfigError(f"Alert rule {category}.{level} needs threshold and condition")
            if rule['condition'] not in ALERT_CONDITIONS:
                raise AlertConfigError(
                    f"Alert rule {category}.{level} has unknown condition: {rule['condition']}"
                )


def load_alert_rules(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load alert rules from YAML.

    Args:
        path: Rules file; defaults to ALERT_RULES_PATH. With neither set,
            a copy of DEFAULT_ALERT_RULES is returned.

    Returns:
        Rules mapping category -> level -> {threshold, condition}

    Raises:
        AlertConfigError: If the file is missing, unreadable or malformed
    """
    if path is None:
        path = os.getenv('ALERT_RULES_PATH')
    if not path:
        return copy.deepcopy(DEFAULT_ALERT_RULES)

    rules_file = Path(path)
    if not rules_file.exists():
        raise AlertConfigError(f"Alert rules file not found: {path}")

    try:
        with open(rules_file, 'r', encoding='utf-8') as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise AlertConfigError(f"Failed to load alert rules: {e}") from e

    if not isinstance(config, dict) or 'rules' not in config:
        raise AlertConfigError("Alert rules file missing 'rules' section")

    rules = config['rules']
    _validate_rules(rules)
    logger.info(f"Loaded {sum(len(v) for v in rules.values())} alert rules from {path}")
    return rules


def check_condition(value: float, rule: Dict[str, Any]) -> bool:
    """
    Evaluate one rule against a value.

    Conditions:
        greater_than / less_than: strict comparison
        equals: within ±0.01
        between: inclusive [low, high] threshold pair
        percentage_change: value is a ratio to average; fires when
            |value - 1| >= |threshold - 1|

    Unknown conditions never fire.
    """
    threshold = rule.get('threshold')
    condition = rule.get('condition')

    if condition == 'greater_than':
        return value > threshold
    if condition == 'less_than':
        return value < threshold
    if condition == 'equals':
        return abs(value - threshold) < EQUALS_TOLERANCE
    if condition == 'between':
        return (
            isinstance(threshold, (list, tuple))
            and len(threshold) == 2
            and threshold[0] <= value <= threshold[1]
        )
    if condition == 'percentage_change':
        return abs(value - 1) >= abs(threshold - 1)
    return False


def _create_alert(
    alert_type: str,
    severity: str,
    symbol: str,
    alert_date: Any,
    message: str,
    value: float,
    threshold: Any,
    data: Dict[str, Any]
) -> Dict[str, Any]:
    return {
        'id': uuid.uuid4().hex,
        'type': alert_type,
        'severity': severity,
        'symbol': symbol,
        'date': alert_date.isoformat() if hasattr(alert_date, 'isoformat') else alert_date,
        'created_at': datetime.now(),
        'message': message,
        'value': value,
        'threshold': threshold,
        'data': data,
        'acknowledged': False,
    }


def check_alerts(
    point: Dict[str, Any],
    symbol: str,
    rules: Optional[Dict[str, Any]] = None,
    avg_volume: Optional[float] = None
) -> List[Dict[str, Any]]:
    """
    Evaluate all rules against one price point.

    Uses the point's volatility and price_change when present (enriched
    points), otherwise derives them from OHLC. Volume rules only run when
    an average volume is supplied.

    Args:
        point: Price point
        symbol: Asset symbol
        rules: Rules mapping (defaults to DEFAULT_ALERT_RULES)
        avg_volume: Average volume for the volume ratio

    Returns:
        Triggered alerts (possibly empty)
    """
    if not point:
        return []

    rules = rules if rules is not None else DEFAULT_ALERT_RULES
    alert_date = point.get('date')
    price = float(point.get('close') or point.get('price') or 0)

    volatility = point.get('volatility')
    if volatility is None:
        volatility = intrabar_volatility_percent(point)
    change = point.get('price_change')
    if change is None:
        change = price_change_percent(point)

    alerts = []

    for level, rule in rules.get('volatility', {}).items():
        if check_condition(volatility, rule):
            alerts.append(_create_alert(
                'volatility',
                'critical' if level == 'critical' else 'high',
                symbol, alert_date,
                f"High volatility detected: {volatility:.2f}%",
                volatility, rule['threshold'],
                {'volatility': volatility, 'price': price},
            ))

    for level, rule in rules.get('performance', {}).items():
        if check_condition(change, rule):
            if 'extreme' in level:
                severity = 'critical'
            elif abs(change) > 10:
                severity = 'high'
            else:
                severity = 'medium'
            alerts.append(_create_alert(
                'performance', severity, symbol, alert_date,
                f"{'Strong gain' if change > 0 else 'Strong loss'}: {change:.2f}%",
                change, rule['threshold'],
                {'price_change': change, 'price': price},
            ))

    if avg_volume:
        volume = float(point.get('volume') or 0)
        ratio = volume / avg_volume
        for level, rule in rules.get('volume', {}).items():
            if check_condition(ratio, rule):
                alerts.append(_create_alert(
                    'volume', 'medium', symbol, alert_date,
                    f"Unusual volume: {ratio:.2f}x average",
                    ratio, rule['threshold'],
                    {'volume': volume, 'avg_volume': avg_volume, 'ratio': ratio},
                ))

    return alerts


class AlertHistory:
    """
    In-memory alert history, newest first, capped at max_size entries.
    """

    def __init__(self, max_size: int = 1000):
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self.max_size = max_size
        self._alerts: List[Dict[str, Any]] = []

    def __len__(self) -> int:
        return len(self._alerts)

    def add(self, alert: Dict[str, Any]) -> None:
        self._alerts.insert(0, alert)
        del self._alerts[self.max_size:]

    def extend(self, alerts: List[Dict[str, Any]]) -> None:
        for alert in alerts:
            self.add(alert)

    def filter(
        self,
        type: Optional[str] = None,
        severity: Optional[str] = None,
        symbol: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        acknowledged: Optional[bool] = None
    ) -> List[Dict[str, Any]]:
        """
        Alerts matching every given filter, newest first.

        date_from/date_to bound the market date of the alert, inclusive.
        """
        results = []
        for alert in self._alerts:
            if type is not None and alert['type'] != type:
                continue
            if severity is not None and alert['severity'] != severity:
                continue
            if symbol is not None and alert['symbol'] != symbol:
                continue
            if acknowledged is not None and alert['acknowledged'] != acknowledged:
                continue
            if date_from is not None or date_to is not None:
                if alert.get('date') is None:
                    continue
                alert_day = as_date(alert['date'])
                if date_from is not None and alert_day < date_from:
                    continue
                if date_to is not None and alert_day > date_to:
                    continue
            results.append(alert)
        return results

    def acknowledge(self, alert_id: str) -> bool:
        """Mark one alert acknowledged; False if no alert has that id."""
        for alert in self._alerts:
            if alert['id'] == alert_id:
                alert['acknowledged'] = True
                return True
        return False

    def acknowledge_all(self, **filters: Any) -> int:
        """Acknowledge every alert matching the filters; returns the count."""
        matched = self.filter(**filters)
        for alert in matched:
            alert['acknowledged'] = True
        return len(matched)

    def clear(self, older_than: Optional[datetime] = None) -> None:
        """Drop all alerts, or only those created before older_than."""
        if older_than is None:
            self._alerts = []
        else:
            self._alerts = [a for a in self._alerts if a['created_at'] >= older_than]
