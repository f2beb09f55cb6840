"""Campaign performance roll-ups, optimization score and recommendation sets."""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Sequence

from .exceptions import NoData
from .options import Objective, OptimizationOptions
from .records import PerformanceRecord

logger = logging.getLogger(__name__)

OBJECTIVE_RECOMMENDATIONS = {
    Objective.MAXIMIZE_ROAS: [
        "Focus budget on high-performing segments",
        "Reduce spend on low ROAS keywords/audiences",
        "Increase bids for high-converting demographics",
    ],
    Objective.MINIMIZE_COST: [
        "Lower bids on expensive keywords",
        "Focus on organic reach opportunities",
        "Optimize ad scheduling for peak performance hours",
    ],
    Objective.MAXIMIZE_CONVERSIONS: [
        "Increase budget for high-converting campaigns",
        "Expand successful audience segments",
        "Test new ad formats and placements",
    ],
}

ROAS_PRIORITY_ACTIONS = [
    "Review and optimize targeting criteria",
    "Improve ad creative and messaging",
    "Consider pausing underperforming ad sets",
]

CONVERSION_PRIORITY_ACTIONS = [
    "Review conversion tracking setup",
    "Optimize landing page experience",
    "Test different call-to-action messages",
]

COST_IMPLEMENTATION_PLAN = [
    "Week 1: Analyze keyword performance and identify high-cost, low-converting terms",
    "Week 2: Reduce bids by 15% on underperforming keywords",
    "Week 3: Pause ad sets with CPC > 150% of average",
    "Week 4: Reallocate 25% of budget to organic initiatives",
    "Week 5-6: Monitor performance and adjust bids based on results",
]

CONVERSION_RECOMMENDATIONS = [
    "Optimize landing page load speed and mobile experience",
    "A/B test different call-to-action buttons and messaging",
    "Implement retargeting campaigns for website visitors",
    "Improve ad copy relevance and alignment with landing pages",
    "Add social proof and customer testimonials to landing pages",
    "Implement conversion tracking for better optimization",
]

CONVERSION_IMPLEMENTATION_PLAN = [
    "Week 1-2: Audit and optimize landing page performance",
    "Week 3-4: Launch A/B tests for ad copy and CTAs",
    "Week 5-6: Implement retargeting pixel and campaigns",
    "Week 7-8: Add social proof elements to key pages",
    "Week 9-10: Analyze results and scale winning variations",
    "Week 11-12: Continuous optimization based on performance data",
]

COST_REDUCTION_RATE = 0.20
CONVERSION_UPLIFT_RATE = 0.25


@dataclass(frozen=True)
class CampaignSummary:
    row_count: int
    total_impressions: int
    total_clicks: int
    total_conversions: int
    total_cost: float
    total_revenue: float
    avg_ctr: float
    avg_cpc: float
    avg_roas: float

    def current_metrics(self):
        return {
            'avg_roas': self.avg_roas,
            'avg_ctr': self.avg_ctr,
            'avg_cpc': self.avg_cpc,
            'total_conversions': self.total_conversions,
            'total_revenue': self.total_revenue,
            'total_cost': self.total_cost,
        }


def summarize_performance(campaign_id, rows: Sequence[PerformanceRecord]) -> CampaignSummary:
    """Sum the counters and average the stored per-row CTR/CPC/ROAS."""
    if not rows:
        raise NoData(f"no performance data found for campaign {campaign_id}")

    count = len(rows)
    return CampaignSummary(
        row_count=count,
        total_impressions=sum(r.impressions for r in rows),
        total_clicks=sum(r.clicks for r in rows),
        total_conversions=sum(r.conversions for r in rows),
        total_cost=sum(r.cost for r in rows),
        total_revenue=sum(r.revenue for r in rows),
        avg_ctr=sum(r.ctr for r in rows) / count,
        avg_cpc=sum(r.cpc for r in rows) / count,
        avg_roas=sum(r.roas for r in rows) / count,
    )


def optimization_score(roas, ctr, conversions) -> float:
    """0-100: ROAS up to 40 points, CTR up to 30, conversions up to 30."""
    if roas >= 4.0:
        score = 40.0
    elif roas >= 2.0:
        score = 30.0
    elif roas >= 1.0:
        score = 20.0
    else:
        score = 10.0

    if ctr >= 3.0:
        score += 30
    elif ctr >= 2.0:
        score += 25
    elif ctr >= 1.0:
        score += 20
    else:
        score += 10

    if conversions >= 100:
        score += 30
    elif conversions >= 50:
        score += 25
    elif conversions >= 10:
        score += 20
    else:
        score += 10

    return score


class OptimizationEngine:

    def optimize(self, campaign_id, rows: Sequence[PerformanceRecord],
                 options: OptimizationOptions) -> Dict[str, Any]:
        summary = summarize_performance(campaign_id, rows)
        objective = options.objective

        result = {
            'campaign_id': campaign_id,
            'objective': objective.value,
            'current_metrics': summary.current_metrics(),
            'recommendations': list(OBJECTIVE_RECOMMENDATIONS[objective]),
        }

        if objective is Objective.MAXIMIZE_ROAS:
            if summary.avg_roas < options.roas_priority_threshold:
                result['priority_actions'] = list(ROAS_PRIORITY_ACTIONS)
        elif objective is Objective.MINIMIZE_COST:
            result['suggested_budget_reduction'] = summary.total_cost * options.budget_reduction_rate
        elif objective is Objective.MAXIMIZE_CONVERSIONS:
            if summary.total_conversions < options.conversions_priority_threshold:
                result['priority_actions'] = list(CONVERSION_PRIORITY_ACTIONS)

        result['optimization_score'] = optimization_score(
            summary.avg_roas, summary.avg_ctr, summary.total_conversions
        )
        logger.info(
            f"Campaign {campaign_id} optimized for {objective.value}: "
            f"score={result['optimization_score']} rows={summary.row_count}"
        )
        return result

    def minimize_cost(self, campaign_id, rows: Sequence[PerformanceRecord]) -> Dict[str, Any]:
        summary = summarize_performance(campaign_id, rows)

        avg_cpc = summary.total_cost / summary.total_clicks if summary.total_clicks else 0.0
        current_roas = summary.total_revenue / summary.total_cost if summary.total_cost else 0.0

        recommendations = [
            "Reduce bids on low-performing keywords by 15-25%",
            f"Pause ad sets with CPC above ${avg_cpc * 1.5:.2f}",
            "Shift budget to organic reach and content marketing",
            "Optimize ad scheduling to focus on peak performance hours",
            "Implement negative keywords to reduce irrelevant clicks",
        ]

        if current_roas < 1.5:
            risk_assessment = "High Risk - Consider campaign restructuring"
        elif current_roas < 2.0:
            risk_assessment = "Medium Risk - Monitor conversion rates closely"
        else:
            risk_assessment = "Low Risk"

        return {
            'optimization_type': Objective.MINIMIZE_COST.value,
            'campaign_id': campaign_id,
            'current_cost': summary.total_cost,
            'current_roas': current_roas,
            'avg_cpc': avg_cpc,
            'projected_savings': summary.total_cost * COST_REDUCTION_RATE,
            'savings_percentage': COST_REDUCTION_RATE * 100,
            'recommendations': recommendations,
            'implementation_plan': list(COST_IMPLEMENTATION_PLAN),
            'risk_assessment': risk_assessment,
        }

    def maximize_conversions(self, campaign_id, rows: Sequence[PerformanceRecord]) -> Dict[str, Any]:
        summary = summarize_performance(campaign_id, rows)

        if summary.total_clicks:
            conversion_rate = summary.total_conversions / summary.total_clicks * 100
        else:
            conversion_rate = 0.0

        if conversion_rate < 1.0:
            expected_timeline = "12-16 weeks for substantial gains"
        else:
            expected_timeline = "8-12 weeks to see significant improvement"

        return {
            'optimization_type': Objective.MAXIMIZE_CONVERSIONS.value,
            'campaign_id': campaign_id,
            'current_conversions': summary.total_conversions,
            'current_conversion_rate': conversion_rate,
            'projected_conversions': int(summary.total_conversions * (1 + CONVERSION_UPLIFT_RATE) + 0.5),
            'improvement_percentage': CONVERSION_UPLIFT_RATE * 100,
            'recommendations': list(CONVERSION_RECOMMENDATIONS),
            'implementation_plan': list(CONVERSION_IMPLEMENTATION_PLAN),
            'expected_timeline': expected_timeline,
        }
