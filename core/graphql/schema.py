import strawberry
from apps.analytics.graphql.queries import AnalyticsQueries
from apps.campaigns.graphql.queries import CampaignQueries
from apps.customers.graphql.queries import CustomerQueries


@strawberry.type
class Query(CustomerQueries, CampaignQueries, AnalyticsQueries):
    pass


schema = strawberry.Schema(query=Query)
