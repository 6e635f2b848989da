"""hltv.org article adapter.

Besides the article text, HLTV news items can embed a match result box and
per-team player statistics. Both are turned into table blocks.
"""

from dataclasses import dataclass, field
from typing import Optional

from bs4 import BeautifulSoup, Tag

from newsdesk.adapters.extractors.base import (
    NO_AUTHOR,
    NO_HEADLINE,
    BaseExtractor,
    collapse_whitespace,
    image_source,
    node_text,
    select_text,
)
from newsdesk.core import ArticleDocument, ContentBlock, FeedItem
from newsdesk.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class MapResult:
    name: str = ""
    team1_score: str = ""
    team2_score: str = ""


@dataclass
class MatchResult:
    event: str = ""
    match_type: str = ""
    team1: str = ""
    team2: str = ""
    team1_score: str = ""
    team2_score: str = ""
    date: str = ""
    maps: list[MapResult] = field(default_factory=list)

    def to_block(self) -> ContentBlock:
        title = " - ".join(part for part in (self.event, self.match_type) if part) or "Match result"
        rows = [
            [self.team1, f"{self.team1_score} - {self.team2_score}", self.team2],
            *([m.team1_score, m.name, m.team2_score] for m in self.maps),
        ]
        if self.date:
            rows.append(["", self.date, ""])
        block = ContentBlock.table(title, rows)
        block.attributes["role"] = "match-result"
        return block


@dataclass
class PlayerStat:
    name: str = ""
    country: str = ""
    kd: str = ""
    plus_minus: str = ""
    adr: str = ""
    rating: str = ""


@dataclass
class TeamStats:
    team: str = ""
    players: list[PlayerStat] = field(default_factory=list)

    def to_block(self) -> ContentBlock:
        rows = [["Player", "K-D", "+/-", "ADR", "Rating"]]
        for player in self.players:
            label = f"{player.country} {player.name}".strip()
            rows.append([label, player.kd, player.plus_minus, player.adr, player.rating])
        block = ContentBlock.table(self.team or "Player statistics", rows)
        block.attributes["role"] = "player-stats"
        return block


class HLTVExtractor(BaseExtractor):
    name = "hltv"
    missing_body_message = "Unable to extract article content. Please view the original article on HLTV.org."

    def parse(self, soup: BeautifulSoup, item: FeedItem) -> ArticleDocument:
        headline = select_text(soup, "h1.headline", NO_HEADLINE)

        authors = [node_text(node) for node in soup.select("div.article-info span.author")]
        authors = [a for a in authors if a]
        author = " & ".join(authors) if authors else NO_AUTHOR

        published = select_text(soup, "div.date", item.pub_date)
        lead = select_text(soup, "p.headertext")

        paragraphs = [
            collapse_whitespace(node.get_text())
            for node in soup.select("div.newstext-con p.news-block")
        ]
        paragraphs = [p for p in paragraphs if p]

        image_url = image_source(soup.select_one("div.image-con > picture > img")) or item.image_url
        caption = select_text(soup, "div.imagetext")

        blocks: list[ContentBlock] = []
        if lead:
            blocks.append(ContentBlock.paragraph(lead, role="lead"))
        if image_url:
            blocks.append(ContentBlock.image(image_url, caption))
        blocks.extend(ContentBlock.paragraph(p) for p in paragraphs)

        match_node = soup.select_one("div.newsitem-match-result")
        match = self._parse_match_result(match_node) if match_node else None
        if match is not None:
            blocks.append(ContentBlock.heading("Match Results"))
            blocks.append(match.to_block())

        team_stats = [self._parse_team_stats(node) for node in soup.select("div.newsitem-match-stats")]
        team_stats = [stats for stats in team_stats if stats is not None]
        if team_stats:
            blocks.append(ContentBlock.heading("Player Statistics"))
            blocks.extend(stats.to_block() for stats in team_stats)

        if not paragraphs:
            # Tables alone do not count as article text
            blocks.append(ContentBlock.paragraph(self.missing_body_message, role="notice"))

        return ArticleDocument(
            headline=headline,
            author=author,
            published_date=published,
            blocks=blocks,
            image_url=image_url,
            body_text="\n".join(paragraphs),
        )

    def _parse_match_result(self, node: Tag) -> Optional[MatchResult]:
        result = MatchResult(
            event=select_text(node, "div.newsitem-match-result-top span.text-ellipsis.bold a"),
            match_type=select_text(node, "span.newsitem-match-type"),
            date=select_text(node, "div.newsitem-match-result-date"),
        )

        teams = node.select("div.newsitem-match-result-team-con")
        if len(teams) >= 2:
            result.team1 = select_text(teams[0], "div.newsitem-match-result-team a")
            result.team2 = select_text(teams[1], "div.newsitem-match-result-team a")

        scores = [node_text(s) for s in node.select("div.newsitem-match-result-score-con div.newsitem-match-result-score")]
        if len(scores) >= 2:
            # The score container also holds a separator cell between the two scores
            result.team1_score, result.team2_score = scores[0], scores[-1]

        for map_node in node.select("div.newsitem-match-result-map"):
            map_scores = [node_text(s) for s in map_node.select("div[class*='newsitem-match-result-map-score']")]
            map_result = MapResult(name=select_text(map_node, "a.newsitem-match-result-map-name"))
            if len(map_scores) >= 2:
                map_result.team1_score, map_result.team2_score = map_scores[0], map_scores[1]
            result.maps.append(map_result)

        if not (result.team1 or result.team2 or result.maps):
            logger.debug("Match result box without teams or maps")
            return None
        return result

    def _parse_team_stats(self, node: Tag) -> Optional[TeamStats]:
        stats = TeamStats(
            team=select_text(node, "tr.newsitem-match-stats-header th.newsitem-match-stats-team a"),
        )

        for row in node.select("tr.newsitem-match-stats-row"):
            country_img = row.select_one("div.newsitem-match-stats-player img")
            player = PlayerStat(
                name=select_text(row, "div.newsitem-match-stats-player a"),
                country=(country_img.get("title") or "") if country_img is not None else "",
                kd=select_text(row, "td.newsitem-match-stats-kd"),
                adr=select_text(row, "td.newsitem-match-stats-adr"),
                rating=select_text(row, "td.newsitem-match-stats-rating"),
            )

            diff_node = row.select_one("td.newsitem-match-stats-kdDiff")
            diff = node_text(diff_node)
            if diff_node is not None and "won" in (diff_node.get("class") or []) and not diff.startswith("+"):
                diff = f"+{diff}"
            player.plus_minus = diff

            stats.players.append(player)

        if not stats.players:
            return None
        return stats
