"""
Tests for rule-based comparison insights.
"""

from comparison.insights import generate_comparison_insights


def period_result(return_diff=0.0, volatility_diff=0.0, volume_ratio=1.0):
    return {
        'period1': {'metrics': {}, 'data': []},
        'period2': {'metrics': {}, 'data': []},
        'differences': {
            'return_difference': return_diff,
            'volatility_difference': volatility_diff,
        },
        'ratios': {'volume_ratio': volume_ratio},
    }


def asset_result(returns, volatilities):
    rankings = [
        {'symbol': symbol, 'total_return': ret, 'volatility': vol}
        for symbol, ret, vol in zip(['AAA', 'BBB', 'CCC', 'DDD'], returns, volatilities)
    ]
    rankings.sort(key=lambda m: m['total_return'], reverse=True)
    return {
        'rankings': rankings,
        'summary': {
            'best_performer': rankings[0],
            'worst_performer': rankings[-1],
            'avg_volatility': sum(volatilities) / len(volatilities),
        },
    }


class TestPeriodInsights:
    """Two-period insight rules."""

    def test_no_insights_below_thresholds(self):
        assert generate_comparison_insights(period_result(4.9, 1.9, 1.5)) == []

    def test_performance_medium(self):
        insights = generate_comparison_insights(period_result(return_diff=8.0))

        assert len(insights) == 1
        assert insights[0]['type'] == 'performance'
        assert insights[0]['severity'] == 'medium'
        assert insights[0]['message'] == 'Current period showing 8.00% better performance'

    def test_performance_high_negative(self):
        insight = generate_comparison_insights(period_result(return_diff=-25.0))[0]

        assert insight['severity'] == 'high'
        assert insight['message'] == 'Previous period performed 25.00% better'

    def test_volatility_messages(self):
        up = generate_comparison_insights(period_result(volatility_diff=3.0))[0]
        down = generate_comparison_insights(period_result(volatility_diff=-12.0))[0]

        assert up['message'] == 'Volatility increased by 3.00%'
        assert up['severity'] == 'medium'
        assert down['message'] == 'Volatility decreased by 12.00%'
        assert down['severity'] == 'high'

    def test_volume_increase(self):
        insight = generate_comparison_insights(period_result(volume_ratio=2.5))[0]

        assert insight['type'] == 'volume'
        assert insight['severity'] == 'medium'
        assert insight['message'] == 'Trading volume increased by 150%'

    def test_volume_decrease_high(self):
        insight = generate_comparison_insights(period_result(volume_ratio=0.25))[0]

        assert insight['severity'] == 'high'
        assert insight['message'] == 'Trading volume decreased by 75%'

    def test_missing_volume_ratio(self):
        assert generate_comparison_insights(period_result(volume_ratio=None)) == []


class TestAssetInsights:
    """Multi-asset insight rules."""

    def test_leader_only(self):
        insights = generate_comparison_insights(asset_result([5.0, 3.0], [2.0, 2.0]))

        assert len(insights) == 1
        assert insights[0]['message'] == 'AAA leads with 5.00% return'

    def test_divergence_medium(self):
        insights = generate_comparison_insights(asset_result([20.0, 5.0], [2.0, 2.0]))

        divergence = [i for i in insights if i['type'] == 'divergence'][0]
        assert divergence['severity'] == 'medium'

    def test_high_volatility_assets(self):
        insights = generate_comparison_insights(
            asset_result([1.0, 2.0, 3.0, 4.0], [1.0, 1.0, 1.0, 10.0])
        )

        volatility = [i for i in insights if i['type'] == 'volatility'][0]
        assert volatility['message'] == '1 asset(s) showing high volatility: DDD'
        assert volatility['value'] == 1

    def test_empty_input(self):
        assert generate_comparison_insights(None) == []
        assert generate_comparison_insights({}) == []
